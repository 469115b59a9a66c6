"""Health Entities Service — hospitals, clinics and blood banks.

Invariants:
    - create resolves the backing User first; a user holds at most one profile (Conflict)
    - institution_type is matched case-insensitively and stored in canonical form
    - remove cascades top-down in ONE transaction: blood bags of every request,
      the requests, the entity, then its backing user; any failure rolls back all
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from bloodbank.core.domain_types import InstitutionType
from bloodbank.core.errors import (
    BadRequestError, ConflictError, ResourceNotFoundError,
)
from bloodbank.core.repository_protocols import RequestRemover
from bloodbank.models.health_entity import HealthEntity
from bloodbank.schemas.donations import (
    HealthEntityCreate, HealthEntityRead, HealthEntityUpdate,
)
from bloodbank.services.rows import delete_row, get_row, list_rows, patch_row
from bloodbank.services.transaction import transaction
from bloodbank.services.users_service import UsersService

logger = logging.getLogger(__name__)


def _parse_institution_type(raw: str) -> InstitutionType:
    parsed = InstitutionType.parse(raw)
    if parsed is None:
        allowed = ", ".join(t.value for t in InstitutionType)
        raise BadRequestError(
            f"Invalid institution type. Allowed values: {allowed}",
            violation="institution_type",
        )
    return parsed


class HealthEntitiesService:
    # Cascade edge, wired by LifecycleServices (requests depend on health entities too)
    requests: RequestRemover

    def __init__(self, db: AsyncSession, users: UsersService):
        self._db = db
        self._users = users

    async def create(self, body: HealthEntityCreate) -> HealthEntityRead:
        async with transaction(self._db):
            user = await self._users.find_one(body.user_id)

            profiles = await self._users.check_user_profiles(user.id)
            if profiles.has_health_entity:
                raise ConflictError("User already has a health entity profile")
            if profiles.has_donor:
                raise ConflictError("User already has a donor profile")

            institution_type = _parse_institution_type(body.institution_type)
            entity = HealthEntity(
                **body.model_dump(exclude={"institution_type", "user_id"}),
                institution_type=institution_type.value,
                user_id=user.id,
            )
            self._db.add(entity)
            await self._db.flush()
        logger.info(
            "Health entity created",
            extra={"entity": "HealthEntity", "entity_id": entity.id, "user_id": user.id},
        )
        return HealthEntityRead.model_validate(entity)

    async def find_all(self) -> list[HealthEntityRead]:
        entities = await list_rows(self._db, HealthEntity)
        if not entities:
            raise ResourceNotFoundError("No health entities found", "HealthEntity")
        return [HealthEntityRead.model_validate(e) for e in entities]

    async def find_one(self, entity_id: int) -> HealthEntityRead:
        entity = await get_row(self._db, HealthEntity, entity_id)
        if entity is None:
            raise ResourceNotFoundError(
                "Health entity not found", "HealthEntity", entity_id,
            )
        return HealthEntityRead.model_validate(entity)

    async def update(
        self, entity_id: int, body: HealthEntityUpdate,
    ) -> HealthEntityRead:
        fields = body.model_dump(exclude_unset=True, exclude_none=True)
        if "institution_type" in fields:
            fields["institution_type"] = _parse_institution_type(
                fields["institution_type"],
            ).value
        async with transaction(self._db):
            affected = await patch_row(self._db, HealthEntity, entity_id, fields)
            if affected == 0:
                raise ResourceNotFoundError(
                    "Health entity not updated", "HealthEntity", entity_id,
                )
        return await self.find_one(entity_id)

    async def remove(self, entity_id: int) -> int:
        async with transaction(self._db):
            entity = await self.find_one(entity_id)
            removed = await self.requests.remove_by_health_entity_id(entity_id)
            affected = await delete_row(self._db, HealthEntity, entity_id)
            if affected == 0:
                raise ResourceNotFoundError(
                    "Health entity not deleted", "HealthEntity", entity_id,
                )
            await self._users.remove(entity.user_id)
        logger.info(
            f"Health entity deleted with {removed} request(s)",
            extra={"entity": "HealthEntity", "entity_id": entity_id, "affected": removed},
        )
        return entity_id

    async def resolve_many(self, entity_ids: set[int]) -> dict[int, HealthEntityRead]:
        """Bulk lookup for read views; every id must exist."""
        if not entity_ids:
            return {}
        entities = await list_rows(
            self._db, HealthEntity, HealthEntity.id.in_(entity_ids),
        )
        missing = entity_ids - {e.id for e in entities}
        if missing:
            raise ResourceNotFoundError(
                "Health entity not found", "HealthEntity", min(missing),
            )
        return {e.id: HealthEntityRead.model_validate(e) for e in entities}
