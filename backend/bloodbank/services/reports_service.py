"""Reports Service — loads flat facts and hands them to core/reports.py.

Invariants:
    - Read-only: never opens a transaction, never writes
    - One joined query per fact family; aggregation happens in pure functions
"""

from datetime import datetime
from typing import Callable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from bloodbank.core import reports
from bloodbank.core.domain_types import GroupBy
from bloodbank.core.reports import BagFact, DonorFact, RequestFact
from bloodbank.models.blood import Blood
from bloodbank.models.blood_bag import BloodBag
from bloodbank.models.donor import Donor
from bloodbank.models.health_entity import HealthEntity
from bloodbank.models.request import Request


class ReportsService:
    def __init__(self, db: AsyncSession, clock: Callable[[], datetime]):
        self._db = db
        self._clock = clock

    async def inventory_by_blood(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
        blood_type: str | None = None,
        rh: str | None = None,
    ) -> list[dict]:
        return reports.inventory_by_blood(
            await self._bag_facts(), start, end, blood_type, rh,
        )

    async def requests_fulfillment(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> dict:
        return reports.requests_fulfillment(
            await self._request_facts(), await self._bag_facts(),
            start, end, limit, offset,
        )

    async def overdue_requests(self) -> list[dict]:
        return reports.overdue_requests(
            await self._request_facts(), await self._bag_facts(), self._clock(),
        )

    async def donors_activity(
        self, start: datetime | None = None, end: datetime | None = None,
    ) -> list[dict]:
        donors = [
            DonorFact(donor_id=d_id, name=f"{name} {lastname}", document=document)
            for d_id, name, lastname, document in (await self._db.execute(
                select(Donor.id, Donor.name, Donor.lastname, Donor.document)
                .order_by(Donor.id),
            )).all()
        ]
        return reports.donors_activity(donors, await self._bag_facts(), start, end)

    async def health_entities_summary(
        self, start: datetime | None = None, end: datetime | None = None,
    ) -> list[dict]:
        return reports.health_entities_summary(
            await self._request_facts(), await self._bag_facts(), start, end,
        )

    async def donations_by_blood(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
        group_by: GroupBy = GroupBy.NONE,
    ) -> list[dict]:
        return reports.donations_by_blood(await self._bag_facts(), start, end, group_by)

    # ─── Fact loading ───────────────────────────────────────────

    async def _bag_facts(self) -> list[BagFact]:
        rows = (await self._db.execute(
            select(
                BloodBag.id, BloodBag.quantity, BloodBag.donation_date,
                Blood.type, Blood.rh, BloodBag.donor_id, BloodBag.request_id,
                Request.health_entity_id,
            )
            .join(Blood, Blood.id == BloodBag.blood_id)
            .outerjoin(Request, Request.id == BloodBag.request_id)
            .order_by(BloodBag.id),
        )).all()
        return [BagFact(*row) for row in rows]

    async def _request_facts(self) -> list[RequestFact]:
        rows = (await self._db.execute(
            select(
                Request.id, Request.quantity_needed, Request.date_created,
                Request.due_date, Blood.type, Blood.rh,
                HealthEntity.id, HealthEntity.name,
            )
            .join(Blood, Blood.id == Request.blood_id)
            .join(HealthEntity, HealthEntity.id == Request.health_entity_id)
            .order_by(Request.id),
        )).all()
        return [RequestFact(*row) for row in rows]
