"""Bloods Service — read-only access to the 8 blood types.

Invariants:
    - Blood rows are never created, updated or deleted through this service
    - find_all on an empty table is NotFound, not an empty list
"""

from sqlalchemy.ext.asyncio import AsyncSession

from bloodbank.core.errors import ResourceNotFoundError
from bloodbank.models.blood import Blood
from bloodbank.schemas.donations import BloodRead
from bloodbank.services.rows import get_row, list_rows


class BloodsService:
    def __init__(self, db: AsyncSession):
        self._db = db

    async def find_all(self) -> list[BloodRead]:
        bloods = await list_rows(self._db, Blood)
        if not bloods:
            raise ResourceNotFoundError("No blood types found", "Blood")
        return [BloodRead.model_validate(b) for b in bloods]

    async def find_one(self, blood_id: int) -> BloodRead:
        blood = await get_row(self._db, Blood, blood_id)
        if blood is None:
            raise ResourceNotFoundError("Blood type not found", "Blood", blood_id)
        return BloodRead.model_validate(blood)

    async def resolve_many(self, blood_ids: set[int]) -> dict[int, BloodRead]:
        """Bulk lookup for read views; every id must exist."""
        if not blood_ids:
            return {}
        bloods = await list_rows(self._db, Blood, Blood.id.in_(blood_ids))
        resolved = {b.id: BloodRead.model_validate(b) for b in bloods}
        missing = blood_ids - resolved.keys()
        if missing:
            raise ResourceNotFoundError(
                "Blood type not found", "Blood", min(missing),
            )
        return resolved
