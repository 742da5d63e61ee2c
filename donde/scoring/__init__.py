"""
Deterministic matching and ranking.

Responsibilities:
- Hold the static keyword and intent lookup tables.
- Score one candidate along five independent dimensions.
- Combine dimensions into the published Donde Match percentage.
- Apply keyword/rejection boosts, re-rank, and rebalance for diversity.

Everything here is pure and synchronous; no I/O, no shared state.
"""
