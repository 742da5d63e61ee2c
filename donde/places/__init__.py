"""
Live place metadata.

Responsibilities:
- Fetch name, contact, rating, reviews and business status for one place id.
- Trim reviews to what the prompt needs.
- Treat every failure as "no metadata"; nothing here is ever persisted.
"""
