"""
Generative provider layer.

Responsibilities:
- Manage Groq API configuration and credentials.
- Build the recommendation prompts from ranked candidates and live reviews.
- Call Groq asynchronously under a hard timeout.
- Parse the untrusted JSON reply, with a regex recovery pass behind the same contract.
"""
