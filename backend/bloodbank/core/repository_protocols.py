"""Boundary Protocols — contracts between the cascade owners and their children.

Invariants:
    - Core NEVER imports from shell; dependency arrows point inward only
    - A parent service reaches its children only through these Protocols

Design Decisions:
    - Protocol over ABC: structural subtyping, the concrete services need no base class
    - Bulk removals return the affected row count; zero is not an error
"""

from typing import Protocol


class BloodBagRemover(Protocol):
    """Children of requests and donors, implemented by BloodBagsService."""
    async def remove_by_request_id(self, request_id: int) -> int: ...
    async def remove_by_donor_id(self, donor_id: int) -> int: ...


class RequestRemover(Protocol):
    """Children of health entities, implemented by RequestsService."""
    async def remove_by_health_entity_id(self, entity_id: int) -> int: ...
