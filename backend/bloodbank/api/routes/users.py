"""User Routes — login identities.

Invariants:
    - DELETE is refused (409) while the user still owns a donor or health-entity profile
"""

from fastapi import APIRouter, Depends, status

from bloodbank.api.dependencies import get_services, require
from bloodbank.core.permissions import Operation
from bloodbank.schemas.auth import UserCreate, UserRead, UserUpdate
from bloodbank.services.registry import LifecycleServices

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.post(
    "", response_model=UserRead, status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require(Operation.USER_CREATE))],
)
async def create_user(
    body: UserCreate, services: LifecycleServices = Depends(get_services),
):
    return await services.users.create(body)


@router.get(
    "", response_model=list[UserRead],
    dependencies=[Depends(require(Operation.USER_READ_ALL))],
)
async def list_users(services: LifecycleServices = Depends(get_services)):
    return await services.users.find_all()


@router.get(
    "/{user_id}", response_model=UserRead,
    dependencies=[Depends(require(Operation.USER_READ_ONE))],
)
async def get_user(user_id: int, services: LifecycleServices = Depends(get_services)):
    return await services.users.find_one(user_id)


@router.patch(
    "/{user_id}", response_model=UserRead,
    dependencies=[Depends(require(Operation.USER_UPDATE))],
)
async def update_user(
    user_id: int, body: UserUpdate,
    services: LifecycleServices = Depends(get_services),
):
    return await services.users.update(user_id, body)


@router.delete(
    "/{user_id}",
    dependencies=[Depends(require(Operation.USER_DELETE))],
)
async def delete_user(user_id: int, services: LifecycleServices = Depends(get_services)):
    return {"id": await services.users.remove(user_id)}
