"""Core Layer — pure visibility policy, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - All functions are pure and deterministic

Design Decisions:
    - Functional core separated from imperative shell: lookups happen in services/,
      decisions and redaction happen here over an already-fetched snapshot
"""
