"""
Request-scoped recommendation engine.

Responsibilities:
- Validate requests (occasion, budget tier, area, craving, exclusions).
- Fetch ranked candidates from the store, relaxing filters when empty.
- Rank, diversify and enrich the shortlist with live metadata.
- Pick one restaurant via the generative call, or synthesize a fallback.
- Cache finished answers and log every outcome.
"""
