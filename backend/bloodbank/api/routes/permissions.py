"""Permission Routes — the capability names roles are built from."""

from fastapi import APIRouter, Depends, status

from bloodbank.api.dependencies import get_services, require
from bloodbank.core.permissions import Operation
from bloodbank.schemas.auth import PermissionCreate, PermissionRead, PermissionUpdate
from bloodbank.services.registry import LifecycleServices

router = APIRouter(prefix="/api/v1/permissions", tags=["permissions"])


@router.post(
    "", response_model=PermissionRead, status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require(Operation.PERMISSION_CREATE))],
)
async def create_permission(
    body: PermissionCreate, services: LifecycleServices = Depends(get_services),
):
    return await services.permissions.create(body)


@router.get(
    "", response_model=list[PermissionRead],
    dependencies=[Depends(require(Operation.PERMISSION_READ_ALL))],
)
async def list_permissions(services: LifecycleServices = Depends(get_services)):
    return await services.permissions.find_all()


@router.get(
    "/{permission_id}", response_model=PermissionRead,
    dependencies=[Depends(require(Operation.PERMISSION_READ_ONE))],
)
async def get_permission(
    permission_id: int, services: LifecycleServices = Depends(get_services),
):
    return await services.permissions.find_one(permission_id)


@router.patch(
    "/{permission_id}", response_model=PermissionRead,
    dependencies=[Depends(require(Operation.PERMISSION_UPDATE))],
)
async def update_permission(
    permission_id: int, body: PermissionUpdate,
    services: LifecycleServices = Depends(get_services),
):
    return await services.permissions.update(permission_id, body)


@router.delete(
    "/{permission_id}",
    dependencies=[Depends(require(Operation.PERMISSION_DELETE))],
)
async def delete_permission(
    permission_id: int, services: LifecycleServices = Depends(get_services),
):
    return {"id": await services.permissions.remove(permission_id)}
