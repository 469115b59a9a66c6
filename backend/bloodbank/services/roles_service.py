"""Roles Service — role CRUD and role ↔ permission assignment.

Invariants:
    - A role's permission set is the union of everything ever assigned to it
    - assign_permissions is idempotent: ids already assigned are skipped, never duplicated
    - Every permission id must exist before anything is assigned (all-or-nothing)
    - A role still referenced by users cannot be removed (Conflict)
"""

import logging
from collections import defaultdict

from sqlalchemy import delete, func, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from bloodbank.core.errors import ConflictError, ResourceNotFoundError
from bloodbank.models.permission import Permission
from bloodbank.models.role import Role, role_permissions
from bloodbank.models.user import User
from bloodbank.schemas.auth import (
    PermissionRead, RoleCreate, RoleRead, RoleUpdate,
)
from bloodbank.services.permissions_service import PermissionsService
from bloodbank.services.rows import delete_row, get_row, list_rows, patch_row
from bloodbank.services.transaction import transaction

logger = logging.getLogger(__name__)


class RolesService:
    def __init__(self, db: AsyncSession, permissions: PermissionsService):
        self._db = db
        self._permissions = permissions

    async def create(self, body: RoleCreate) -> RoleRead:
        async with transaction(self._db):
            await self._ensure_name_free(body.name)
            role = Role(name=body.name)
            self._db.add(role)
            await self._db.flush()
        logger.info(
            f"Role '{role.name}' created",
            extra={"entity": "Role", "entity_id": role.id},
        )
        return RoleRead(id=role.id, name=role.name, permissions=[])

    async def find_all(self) -> list[RoleRead]:
        roles = await list_rows(self._db, Role)
        if not roles:
            raise ResourceNotFoundError("No roles found", "Role")
        resolved = await self.resolve_many({r.id for r in roles})
        return [resolved[r.id] for r in roles]

    async def find_one(self, role_id: int) -> RoleRead:
        role = await get_row(self._db, Role, role_id)
        if role is None:
            raise ResourceNotFoundError("Role not found", "Role", role_id)
        return RoleRead(
            id=role.id, name=role.name,
            permissions=await self.get_role_permissions(role.id),
        )

    async def find_by_name(self, name: str) -> RoleRead:
        role_id = await self._db.scalar(select(Role.id).where(Role.name == name))
        if role_id is None:
            raise ResourceNotFoundError("Role not found", "Role")
        return await self.find_one(role_id)

    async def update(self, role_id: int, body: RoleUpdate) -> RoleRead:
        fields = body.model_dump(exclude_unset=True, exclude_none=True)
        async with transaction(self._db):
            if "name" in fields:
                await self._ensure_name_free(fields["name"], role_id)
            affected = await patch_row(self._db, Role, role_id, fields)
            if affected == 0:
                raise ResourceNotFoundError("Role not updated", "Role", role_id)
        return await self.find_one(role_id)

    async def remove(self, role_id: int) -> int:
        async with transaction(self._db):
            holders = await self._db.scalar(
                select(func.count(User.id)).where(User.role_id == role_id),
            )
            if holders:
                raise ConflictError(
                    "Cannot delete role: it is still assigned to users",
                )
            await self._db.execute(
                delete(role_permissions).where(role_permissions.c.role_id == role_id),
            )
            affected = await delete_row(self._db, Role, role_id)
            if affected == 0:
                raise ResourceNotFoundError("Role not deleted", "Role", role_id)
        return role_id

    # ─── Permission assignment ──────────────────────────────────

    async def assign_permissions(
        self, role_id: int, permission_ids: list[int],
    ) -> RoleRead:
        """Union the given permissions into the role's set."""
        async with transaction(self._db):
            await self.find_one(role_id)
            wanted = list(dict.fromkeys(permission_ids))
            for permission_id in wanted:
                await self._permissions.find_one(permission_id)

            assigned = set((await self._db.execute(
                select(role_permissions.c.permission_id)
                .where(role_permissions.c.role_id == role_id),
            )).scalars().all())
            new_ids = [pid for pid in wanted if pid not in assigned]
            if new_ids:
                await self._db.execute(
                    insert(role_permissions),
                    [{"role_id": role_id, "permission_id": pid} for pid in new_ids],
                )
        logger.info(
            f"Assigned {len(new_ids)} new permission(s) to role {role_id}",
            extra={"entity": "Role", "entity_id": role_id},
        )
        return await self.find_one(role_id)

    async def remove_permission(self, role_id: int, permission_id: int) -> RoleRead:
        async with transaction(self._db):
            await self.find_one(role_id)
            await self._db.execute(
                delete(role_permissions).where(
                    role_permissions.c.role_id == role_id,
                    role_permissions.c.permission_id == permission_id,
                ),
            )
        return await self.find_one(role_id)

    async def get_role_permissions(self, role_id: int) -> list[PermissionRead]:
        rows = (await self._db.execute(
            select(Permission)
            .join(role_permissions, role_permissions.c.permission_id == Permission.id)
            .where(role_permissions.c.role_id == role_id)
            .order_by(Permission.id),
        )).scalars().all()
        return [PermissionRead.model_validate(p) for p in rows]

    async def resolve_many(self, role_ids: set[int]) -> dict[int, RoleRead]:
        """Bulk lookup of roles with their permissions; every id must exist."""
        if not role_ids:
            return {}
        roles = await list_rows(self._db, Role, Role.id.in_(role_ids))
        missing = role_ids - {r.id for r in roles}
        if missing:
            raise ResourceNotFoundError("Role not found", "Role", min(missing))

        by_role: dict[int, list[PermissionRead]] = defaultdict(list)
        rows = (await self._db.execute(
            select(role_permissions.c.role_id, Permission)
            .join(Permission, Permission.id == role_permissions.c.permission_id)
            .where(role_permissions.c.role_id.in_(role_ids))
            .order_by(Permission.id),
        )).all()
        for rid, permission in rows:
            by_role[rid].append(PermissionRead.model_validate(permission))

        return {
            r.id: RoleRead(id=r.id, name=r.name, permissions=by_role[r.id])
            for r in roles
        }

    async def _ensure_name_free(self, name: str, own_id: int | None = None) -> None:
        existing = await self._db.scalar(select(Role.id).where(Role.name == name))
        if existing is not None and existing != own_id:
            raise ConflictError(f"Role '{name}' already exists")
