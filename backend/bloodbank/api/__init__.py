"""API Layer — FastAPI routers, access guards and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Every protected route declares its Operation through require()

Design Decisions:
    - Thin routes delegate to the lifecycle services; no business logic here
"""
