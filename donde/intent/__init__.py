"""
Free-text craving classification.

Responsibilities:
- Turn a craving into target cuisines, tags, features and softer hints.
- Coerce whatever the model returns into a valid shape.
- Never fail a request: any problem means "no intent".
"""
