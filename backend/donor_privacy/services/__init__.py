"""Services Layer — async orchestration around the pure policy core.

Invariants:
    - All repository IO happens here; decisions are delegated to core/
    - Nothing here holds state beyond one response

Design Decisions:
    - Impureim sandwich: fetch (async) → decide/redact (pure) → return
"""
