"""Users Service — login identities and their profile exclusivity.

Invariants:
    - Email is unique and stored lowercase (Conflict on duplicates, on create and update)
    - A role_id change must name an existing role (NotFound otherwise)
    - A user with a donor or health-entity profile cannot be removed directly;
      the profile's own remove() deletes the backing user in its transaction
    - check_user_profiles is a read-only count, never a write
"""

import logging
from dataclasses import dataclass

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from bloodbank.core.errors import ConflictError, ResourceNotFoundError
from bloodbank.models.donor import Donor
from bloodbank.models.health_entity import HealthEntity
from bloodbank.models.user import User
from bloodbank.schemas.auth import UserCreate, UserRead, UserUpdate
from bloodbank.services.roles_service import RolesService
from bloodbank.services.rows import delete_row, get_row, list_rows, patch_row
from bloodbank.services.transaction import transaction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserProfiles:
    has_donor: bool
    has_health_entity: bool

    @property
    def has_any_profile(self) -> bool:
        return self.has_donor or self.has_health_entity


class UsersService:
    def __init__(self, db: AsyncSession, roles: RolesService):
        self._db = db
        self._roles = roles

    async def create(self, body: UserCreate) -> UserRead:
        async with transaction(self._db):
            role = await self._roles.find_by_name(body.role_name)
            await self._ensure_email_free(body.email)
            user = User(
                email=body.email, password_hash=body.password_hash, role_id=role.id,
            )
            self._db.add(user)
            await self._db.flush()
        logger.info(
            "User created", extra={"entity": "User", "entity_id": user.id},
        )
        return await self.find_one(user.id)

    async def find_all(self) -> list[UserRead]:
        users = await list_rows(self._db, User)
        if not users:
            raise ResourceNotFoundError("No users found", "User")
        roles = await self._roles.resolve_many({u.role_id for u in users})
        return [
            UserRead(id=u.id, email=u.email, role=roles[u.role_id]) for u in users
        ]

    async def find_one(self, user_id: int) -> UserRead:
        user = await get_row(self._db, User, user_id)
        if user is None:
            raise ResourceNotFoundError("User not found", "User", user_id)
        return UserRead(
            id=user.id, email=user.email,
            role=await self._roles.find_one(user.role_id),
        )

    async def find_by_email(self, email: str) -> UserRead:
        user_id = await self._db.scalar(
            select(User.id).where(User.email == email.strip().lower()),
        )
        if user_id is None:
            raise ResourceNotFoundError("User not found", "User")
        return await self.find_one(user_id)

    async def update(self, user_id: int, body: UserUpdate) -> UserRead:
        fields = body.model_dump(exclude_unset=True, exclude_none=True)
        async with transaction(self._db):
            if "role_id" in fields:
                await self._roles.find_one(fields["role_id"])
            if "email" in fields:
                await self._ensure_email_free(fields["email"], user_id)
            affected = await patch_row(self._db, User, user_id, fields)
            if affected == 0:
                raise ResourceNotFoundError("User not updated", "User", user_id)
        return await self.find_one(user_id)

    async def remove(self, user_id: int) -> int:
        async with transaction(self._db):
            profiles = await self.check_user_profiles(user_id)
            if profiles.has_donor:
                raise ConflictError(
                    "Cannot delete user: User has an associated donor profile. "
                    "Delete the donor first.",
                )
            if profiles.has_health_entity:
                raise ConflictError(
                    "Cannot delete user: User has an associated health entity "
                    "profile. Delete the health entity first.",
                )
            affected = await delete_row(self._db, User, user_id)
            if affected == 0:
                raise ResourceNotFoundError("User not deleted", "User", user_id)
        logger.info("User deleted", extra={"entity": "User", "entity_id": user_id})
        return user_id

    async def check_user_profiles(self, user_id: int) -> UserProfiles:
        donors = await self._db.scalar(
            select(func.count(Donor.id)).where(Donor.user_id == user_id),
        )
        entities = await self._db.scalar(
            select(func.count(HealthEntity.id)).where(HealthEntity.user_id == user_id),
        )
        return UserProfiles(
            has_donor=bool(donors), has_health_entity=bool(entities),
        )

    async def _ensure_email_free(self, email: str, own_id: int | None = None) -> None:
        existing = await self._db.scalar(select(User.id).where(User.email == email))
        if existing is not None and existing != own_id:
            raise ConflictError("User with this email already exists")
