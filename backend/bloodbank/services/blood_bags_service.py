"""Blood Bags Service — donation units delivered against a request.

Invariants:
    - create resolves Blood, then Donor, then Request, then checks
      quantity → expiration date → blood-type match (first violation wins)
    - A bag's blood_id always equals its request's blood_id at creation
    - donation_date defaults to the injected clock's now
    - remove_by_request_id / remove_by_donor_id are bulk deletes used by the
      parent cascades; zero affected rows is not an error
"""

import logging
from datetime import datetime
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from bloodbank.core.errors import BadRequestError, ResourceNotFoundError
from bloodbank.core.validators import (
    check_blood_type_matches,
    check_future_date,
    check_positive_quantity,
    first_violation,
    violation_message,
)
from bloodbank.models.blood_bag import BloodBag
from bloodbank.schemas.donations import (
    BloodBagCreate, BloodBagRead, BloodBagUpdate,
)
from bloodbank.services.bloods_service import BloodsService
from bloodbank.services.donors_service import DonorsService
from bloodbank.services.requests_service import RequestsService
from bloodbank.services.rows import delete_row, delete_where, get_row, list_rows, patch_row
from bloodbank.services.transaction import transaction

logger = logging.getLogger(__name__)


class BloodBagsService:
    def __init__(
        self,
        db: AsyncSession,
        bloods: BloodsService,
        donors: DonorsService,
        requests: RequestsService,
        clock: Callable[[], datetime],
    ):
        self._db = db
        self._bloods = bloods
        self._donors = donors
        self._requests = requests
        self._clock = clock

    async def create(self, body: BloodBagCreate) -> BloodBagRead:
        async with transaction(self._db):
            blood = await self._bloods.find_one(body.blood_id)
            donor = await self._donors.find_one(body.donor_id)
            request = await self._requests.find_one(body.request_id)

            now = self._clock()
            violation = first_violation(
                check_positive_quantity(body.quantity),
                check_future_date(body.expiration_date, now),
                check_blood_type_matches(blood.id, request.blood.id),
            )
            if violation is not None:
                raise BadRequestError(
                    violation_message(violation, "Expiration date"),
                    violation=violation.value,
                )

            bag = BloodBag(
                quantity=body.quantity,
                donation_date=body.donation_date or now,
                expiration_date=body.expiration_date,
                blood_id=blood.id,
                donor_id=donor.id,
                request_id=request.id,
            )
            self._db.add(bag)
            await self._db.flush()
        logger.info(
            f"Blood bag of {blood.label} x{bag.quantity} delivered to request {request.id}",
            extra={"entity": "BloodBag", "entity_id": bag.id},
        )
        return BloodBagRead(
            id=bag.id,
            quantity=bag.quantity,
            donation_date=bag.donation_date,
            expiration_date=bag.expiration_date,
            blood=blood,
            donor=donor,
            request=request,
        )

    async def find_all(self) -> list[BloodBagRead]:
        bags = await list_rows(self._db, BloodBag)
        if not bags:
            raise ResourceNotFoundError("No blood bags found", "BloodBag")
        bloods = await self._bloods.resolve_many({b.blood_id for b in bags})
        donors = await self._donors.resolve_many({b.donor_id for b in bags})
        requests = await self._requests.resolve_many({b.request_id for b in bags})
        return [
            BloodBagRead(
                id=b.id,
                quantity=b.quantity,
                donation_date=b.donation_date,
                expiration_date=b.expiration_date,
                blood=bloods[b.blood_id],
                donor=donors[b.donor_id],
                request=requests[b.request_id],
            )
            for b in bags
        ]

    async def find_one(self, bag_id: int) -> BloodBagRead:
        bag = await get_row(self._db, BloodBag, bag_id)
        if bag is None:
            raise ResourceNotFoundError("Blood bag not found", "BloodBag", bag_id)
        return BloodBagRead(
            id=bag.id,
            quantity=bag.quantity,
            donation_date=bag.donation_date,
            expiration_date=bag.expiration_date,
            blood=await self._bloods.find_one(bag.blood_id),
            donor=await self._donors.find_one(bag.donor_id),
            request=await self._requests.find_one(bag.request_id),
        )

    async def update(self, bag_id: int, body: BloodBagUpdate) -> BloodBagRead:
        fields = body.model_dump(exclude_unset=True, exclude_none=True)
        async with transaction(self._db):
            affected = await patch_row(self._db, BloodBag, bag_id, fields)
            if affected == 0:
                raise ResourceNotFoundError(
                    "Blood bag not updated", "BloodBag", bag_id,
                )
        return await self.find_one(bag_id)

    async def remove(self, bag_id: int) -> int:
        async with transaction(self._db):
            affected = await delete_row(self._db, BloodBag, bag_id)
            if affected == 0:
                raise ResourceNotFoundError(
                    "Blood bag not deleted", "BloodBag", bag_id,
                )
        logger.info("Blood bag deleted", extra={"entity": "BloodBag", "entity_id": bag_id})
        return bag_id

    async def remove_by_request_id(self, request_id: int) -> int:
        async with transaction(self._db):
            affected = await delete_where(
                self._db, BloodBag, BloodBag.request_id == request_id,
            )
        return affected

    async def remove_by_donor_id(self, donor_id: int) -> int:
        async with transaction(self._db):
            affected = await delete_where(
                self._db, BloodBag, BloodBag.donor_id == donor_id,
            )
        return affected
