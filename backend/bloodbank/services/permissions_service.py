"""Permissions Service — CRUD for capability names.

Invariants:
    - Permission names are unique (Conflict on duplicates)
    - Removing a permission first detaches it from every role, in the same transaction
"""

import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from bloodbank.core.errors import ConflictError, ResourceNotFoundError
from bloodbank.models.permission import Permission
from bloodbank.models.role import role_permissions
from bloodbank.schemas.auth import PermissionCreate, PermissionRead, PermissionUpdate
from bloodbank.services.rows import delete_row, get_row, list_rows, patch_row
from bloodbank.services.transaction import transaction

logger = logging.getLogger(__name__)


class PermissionsService:
    def __init__(self, db: AsyncSession):
        self._db = db

    async def create(self, body: PermissionCreate) -> PermissionRead:
        async with transaction(self._db):
            await self._ensure_name_free(body.name)
            permission = Permission(name=body.name)
            self._db.add(permission)
            await self._db.flush()
        logger.info(
            f"Permission '{permission.name}' created",
            extra={"entity": "Permission", "entity_id": permission.id},
        )
        return PermissionRead.model_validate(permission)

    async def find_all(self) -> list[PermissionRead]:
        permissions = await list_rows(self._db, Permission)
        if not permissions:
            raise ResourceNotFoundError("No permissions found", "Permission")
        return [PermissionRead.model_validate(p) for p in permissions]

    async def find_one(self, permission_id: int) -> PermissionRead:
        permission = await get_row(self._db, Permission, permission_id)
        if permission is None:
            raise ResourceNotFoundError(
                "Permission not found", "Permission", permission_id,
            )
        return PermissionRead.model_validate(permission)

    async def update(
        self, permission_id: int, body: PermissionUpdate,
    ) -> PermissionRead:
        fields = body.model_dump(exclude_unset=True, exclude_none=True)
        async with transaction(self._db):
            if "name" in fields:
                await self._ensure_name_free(fields["name"], permission_id)
            affected = await patch_row(self._db, Permission, permission_id, fields)
            if affected == 0:
                raise ResourceNotFoundError(
                    "Permission not updated", "Permission", permission_id,
                )
        return await self.find_one(permission_id)

    async def remove(self, permission_id: int) -> int:
        async with transaction(self._db):
            await self._db.execute(
                delete(role_permissions)
                .where(role_permissions.c.permission_id == permission_id),
            )
            affected = await delete_row(self._db, Permission, permission_id)
            if affected == 0:
                raise ResourceNotFoundError(
                    "Permission not deleted", "Permission", permission_id,
                )
        return permission_id

    async def _ensure_name_free(self, name: str, own_id: int | None = None) -> None:
        existing = await self._db.scalar(
            select(Permission.id).where(Permission.name == name),
        )
        if existing is not None and existing != own_id:
            raise ConflictError(f"Permission '{name}' already exists")
