"""Donors Service — donor profiles backed by a user and a blood type.

Invariants:
    - create resolves User, then Blood; a user holds at most one profile (Conflict)
    - remove cascades: the donor's blood bags, then the donor, then its backing
      user, all in one transaction (precheck-then-delete)
    - update patches columns directly, no re-validation
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from bloodbank.core.errors import ConflictError, ResourceNotFoundError
from bloodbank.core.repository_protocols import BloodBagRemover
from bloodbank.models.donor import Donor
from bloodbank.schemas.donations import DonorCreate, DonorRead, DonorUpdate
from bloodbank.services.bloods_service import BloodsService
from bloodbank.services.rows import delete_row, get_row, list_rows, patch_row
from bloodbank.services.transaction import transaction
from bloodbank.services.users_service import UsersService

logger = logging.getLogger(__name__)


class DonorsService:
    # Cascade edge, wired by LifecycleServices (blood bags depend on donors too)
    blood_bags: BloodBagRemover

    def __init__(self, db: AsyncSession, users: UsersService, bloods: BloodsService):
        self._db = db
        self._users = users
        self._bloods = bloods

    async def create(self, body: DonorCreate) -> DonorRead:
        async with transaction(self._db):
            user = await self._users.find_one(body.user_id)
            blood = await self._bloods.find_one(body.blood_id)

            profiles = await self._users.check_user_profiles(user.id)
            if profiles.has_donor:
                raise ConflictError("User already has a donor profile")
            if profiles.has_health_entity:
                raise ConflictError("User already has a health entity profile")

            donor = Donor(
                document=body.document, name=body.name, lastname=body.lastname,
                birth_date=body.birth_date, user_id=user.id, blood_id=blood.id,
            )
            self._db.add(donor)
            await self._db.flush()
        logger.info(
            "Donor created",
            extra={"entity": "Donor", "entity_id": donor.id, "user_id": user.id},
        )
        return self._to_read(donor, blood)

    async def find_all(self) -> list[DonorRead]:
        donors = await list_rows(self._db, Donor)
        if not donors:
            raise ResourceNotFoundError("No donors found", "Donor")
        bloods = await self._bloods.resolve_many({d.blood_id for d in donors})
        return [self._to_read(d, bloods[d.blood_id]) for d in donors]

    async def find_one(self, donor_id: int) -> DonorRead:
        donor = await get_row(self._db, Donor, donor_id)
        if donor is None:
            raise ResourceNotFoundError("Donor not found", "Donor", donor_id)
        return self._to_read(donor, await self._bloods.find_one(donor.blood_id))

    async def update(self, donor_id: int, body: DonorUpdate) -> DonorRead:
        fields = body.model_dump(exclude_unset=True, exclude_none=True)
        async with transaction(self._db):
            affected = await patch_row(self._db, Donor, donor_id, fields)
            if affected == 0:
                raise ResourceNotFoundError("Donor not updated", "Donor", donor_id)
        return await self.find_one(donor_id)

    async def remove(self, donor_id: int) -> int:
        async with transaction(self._db):
            donor = await self.find_one(donor_id)
            bags = await self.blood_bags.remove_by_donor_id(donor_id)
            affected = await delete_row(self._db, Donor, donor_id)
            if affected == 0:
                raise ResourceNotFoundError("Donor not deleted", "Donor", donor_id)
            await self._users.remove(donor.user_id)
        logger.info(
            f"Donor deleted with {bags} blood bag(s)",
            extra={"entity": "Donor", "entity_id": donor_id, "affected": bags},
        )
        return donor_id

    async def resolve_many(self, donor_ids: set[int]) -> dict[int, DonorRead]:
        """Bulk lookup for read views; every id must exist."""
        if not donor_ids:
            return {}
        donors = await list_rows(self._db, Donor, Donor.id.in_(donor_ids))
        missing = donor_ids - {d.id for d in donors}
        if missing:
            raise ResourceNotFoundError("Donor not found", "Donor", min(missing))
        bloods = await self._bloods.resolve_many({d.blood_id for d in donors})
        return {d.id: self._to_read(d, bloods[d.blood_id]) for d in donors}

    @staticmethod
    def _to_read(donor: Donor, blood) -> DonorRead:
        return DonorRead(
            id=donor.id, document=donor.document, name=donor.name,
            lastname=donor.lastname, birth_date=donor.birth_date,
            user_id=donor.user_id, blood=blood,
        )
