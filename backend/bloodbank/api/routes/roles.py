"""Role Routes — role CRUD and permission assignment.

Invariants:
    - POST /{role_id}/permissions unions the given ids into the role (idempotent)
    - Assignment and removal require role_update, listing requires role_read
"""

from fastapi import APIRouter, Depends, status

from bloodbank.api.dependencies import get_services, require
from bloodbank.core.permissions import Operation
from bloodbank.schemas.auth import (
    AssignPermissions, PermissionRead, RoleCreate, RoleRead, RoleUpdate,
)
from bloodbank.services.registry import LifecycleServices

router = APIRouter(prefix="/api/v1/roles", tags=["roles"])


@router.post(
    "", response_model=RoleRead, status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require(Operation.ROLE_CREATE))],
)
async def create_role(
    body: RoleCreate, services: LifecycleServices = Depends(get_services),
):
    return await services.roles.create(body)


@router.get(
    "", response_model=list[RoleRead],
    dependencies=[Depends(require(Operation.ROLE_READ_ALL))],
)
async def list_roles(services: LifecycleServices = Depends(get_services)):
    return await services.roles.find_all()


@router.get(
    "/{role_id}", response_model=RoleRead,
    dependencies=[Depends(require(Operation.ROLE_READ_ONE))],
)
async def get_role(role_id: int, services: LifecycleServices = Depends(get_services)):
    return await services.roles.find_one(role_id)


@router.patch(
    "/{role_id}", response_model=RoleRead,
    dependencies=[Depends(require(Operation.ROLE_UPDATE))],
)
async def update_role(
    role_id: int, body: RoleUpdate,
    services: LifecycleServices = Depends(get_services),
):
    return await services.roles.update(role_id, body)


@router.delete(
    "/{role_id}",
    dependencies=[Depends(require(Operation.ROLE_DELETE))],
)
async def delete_role(role_id: int, services: LifecycleServices = Depends(get_services)):
    return {"id": await services.roles.remove(role_id)}


# ─── Permission assignment ──────────────────────────────────────

@router.get(
    "/{role_id}/permissions", response_model=list[PermissionRead],
    dependencies=[Depends(require(Operation.ROLE_READ_PERMISSIONS))],
)
async def list_role_permissions(
    role_id: int, services: LifecycleServices = Depends(get_services),
):
    await services.roles.find_one(role_id)
    return await services.roles.get_role_permissions(role_id)


@router.post(
    "/{role_id}/permissions", response_model=RoleRead,
    dependencies=[Depends(require(Operation.ROLE_ASSIGN_PERMISSIONS))],
)
async def assign_role_permissions(
    role_id: int, body: AssignPermissions,
    services: LifecycleServices = Depends(get_services),
):
    return await services.roles.assign_permissions(role_id, body.permission_ids)


@router.delete(
    "/{role_id}/permissions/{permission_id}", response_model=RoleRead,
    dependencies=[Depends(require(Operation.ROLE_REMOVE_PERMISSION))],
)
async def remove_role_permission(
    role_id: int, permission_id: int,
    services: LifecycleServices = Depends(get_services),
):
    return await services.roles.remove_permission(role_id, permission_id)
