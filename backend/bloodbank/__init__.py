"""Blood Bank Application Package — donors, health entities, requests and blood bags.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Empty __init__.py: explicit imports only, no star exports
"""
