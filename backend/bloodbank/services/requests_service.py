"""Requests Service — a health entity's need for units of one blood type.

Invariants:
    - create resolves HealthEntity, then Blood, then runs quantity → due date checks;
      nothing is written before every check passes
    - date_created is stamped from the injected clock, never from the client
    - remove cascades: blood bags of the request, then the request (one transaction)
    - remove_by_health_entity_id removes the bags of every affected request first;
      zero affected rows is not an error

Design Decisions:
    - update patches columns directly without re-running the create validators
"""

import logging
from datetime import datetime
from typing import Callable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from bloodbank.core.errors import BadRequestError, ResourceNotFoundError
from bloodbank.core.repository_protocols import BloodBagRemover
from bloodbank.core.validators import (
    check_future_date, check_positive_quantity, first_violation, violation_message,
)
from bloodbank.models.request import Request
from bloodbank.schemas.donations import (
    BloodRead, HealthEntityRead, RequestCreate, RequestRead, RequestUpdate,
)
from bloodbank.services.bloods_service import BloodsService
from bloodbank.services.health_entities_service import HealthEntitiesService
from bloodbank.services.rows import delete_row, delete_where, get_row, list_rows, patch_row
from bloodbank.services.transaction import transaction

logger = logging.getLogger(__name__)


class RequestsService:
    # Cascade edge, wired by LifecycleServices (blood bags depend on requests too)
    blood_bags: BloodBagRemover

    def __init__(
        self,
        db: AsyncSession,
        bloods: BloodsService,
        health_entities: HealthEntitiesService,
        clock: Callable[[], datetime],
    ):
        self._db = db
        self._bloods = bloods
        self._health_entities = health_entities
        self._clock = clock

    async def create(self, body: RequestCreate) -> RequestRead:
        async with transaction(self._db):
            entity = await self._health_entities.find_one(body.health_entity_id)
            blood = await self._bloods.find_one(body.blood_id)

            now = self._clock()
            violation = first_violation(
                check_positive_quantity(body.quantity_needed),
                check_future_date(body.due_date, now),
            )
            if violation is not None:
                raise BadRequestError(
                    violation_message(violation, "Due date"), violation=violation.value,
                )

            request = Request(
                date_created=now,
                quantity_needed=body.quantity_needed,
                due_date=body.due_date,
                blood_id=blood.id,
                health_entity_id=entity.id,
            )
            self._db.add(request)
            await self._db.flush()
        logger.info(
            f"Request created for {blood.label} x{request.quantity_needed}",
            extra={"entity": "Request", "entity_id": request.id},
        )
        return self._to_read(request, blood, entity)

    async def find_all(self) -> list[RequestRead]:
        requests = await list_rows(self._db, Request)
        if not requests:
            raise ResourceNotFoundError("No requests found", "Request")
        return await self._resolve(requests)

    async def find_one(self, request_id: int) -> RequestRead:
        request = await get_row(self._db, Request, request_id)
        if request is None:
            raise ResourceNotFoundError("Request not found", "Request", request_id)
        return self._to_read(
            request,
            await self._bloods.find_one(request.blood_id),
            await self._health_entities.find_one(request.health_entity_id),
        )

    async def find_by_health_entity_id(self, entity_id: int) -> list[RequestRead]:
        """Requests of one health entity; an empty list when it has none."""
        requests = await list_rows(
            self._db, Request, Request.health_entity_id == entity_id,
        )
        return await self._resolve(requests)

    async def update(self, request_id: int, body: RequestUpdate) -> RequestRead:
        fields = body.model_dump(exclude_unset=True, exclude_none=True)
        async with transaction(self._db):
            affected = await patch_row(self._db, Request, request_id, fields)
            if affected == 0:
                raise ResourceNotFoundError(
                    "Request not updated", "Request", request_id,
                )
        return await self.find_one(request_id)

    async def remove(self, request_id: int) -> int:
        async with transaction(self._db):
            await self.find_one(request_id)
            bags = await self.blood_bags.remove_by_request_id(request_id)
            affected = await delete_row(self._db, Request, request_id)
            if affected == 0:
                raise ResourceNotFoundError(
                    "Request not deleted", "Request", request_id,
                )
        logger.info(
            f"Request deleted with {bags} blood bag(s)",
            extra={"entity": "Request", "entity_id": request_id, "affected": bags},
        )
        return request_id

    async def remove_by_health_entity_id(self, entity_id: int) -> int:
        """Delete every request of the entity and their blood bags. Returns requests removed."""
        async with transaction(self._db):
            request_ids = (await self._db.execute(
                select(Request.id).where(Request.health_entity_id == entity_id),
            )).scalars().all()
            for request_id in request_ids:
                await self.blood_bags.remove_by_request_id(request_id)
            affected = await delete_where(
                self._db, Request, Request.health_entity_id == entity_id,
            )
        return affected

    async def resolve_many(self, request_ids: set[int]) -> dict[int, RequestRead]:
        """Bulk lookup for read views; every id must exist."""
        if not request_ids:
            return {}
        requests = await list_rows(self._db, Request, Request.id.in_(request_ids))
        missing = request_ids - {r.id for r in requests}
        if missing:
            raise ResourceNotFoundError("Request not found", "Request", min(missing))
        resolved = await self._resolve(requests)
        return {r.id: r for r in resolved}

    async def _resolve(self, requests: list[Request]) -> list[RequestRead]:
        bloods = await self._bloods.resolve_many({r.blood_id for r in requests})
        entities = await self._health_entities.resolve_many(
            {r.health_entity_id for r in requests},
        )
        return [
            self._to_read(r, bloods[r.blood_id], entities[r.health_entity_id])
            for r in requests
        ]

    @staticmethod
    def _to_read(
        request: Request, blood: BloodRead, entity: HealthEntityRead,
    ) -> RequestRead:
        return RequestRead(
            id=request.id,
            date_created=request.date_created,
            quantity_needed=request.quantity_needed,
            due_date=request.due_date,
            blood=blood,
            health_entity=entity,
        )
