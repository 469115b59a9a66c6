"""Infrastructure Layer — database engine and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from core/ domain logic other than the error types
    - SQLAlchemy exceptions are mapped to ConflictError or DatabaseError at the session boundary
"""
