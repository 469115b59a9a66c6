"""Services Layer — entity lifecycle services and identity resolution.

Invariants:
    - One service per entity family; siblings wired explicitly in registry.py
    - Every mutation runs inside services.transaction.transaction(db)
    - References resolved and validators run BEFORE the first write

Design Decisions:
    - Services receive the request's AsyncSession: all siblings share one transaction
"""
