"""Core Layer — pure domain logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - All functions are pure and deterministic (the clock is always passed in)

Design Decisions:
    - Functional core separated from imperative shell: access decisions and
      domain validators are plain functions tested without fixtures
"""
