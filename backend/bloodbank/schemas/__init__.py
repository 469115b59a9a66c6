"""Pydantic Schemas — input validation and resolved read views at the API boundary.

Invariants:
    - *Create schemas carry foreign keys as ids; *Read schemas carry resolved objects
    - *Update schemas are partial: only explicitly set fields reach the store
    - Domain invariants (quantity, dates, blood match) are NOT checked here;
      the lifecycle services own them so failures carry the exact reason

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
