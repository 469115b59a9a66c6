"""Request Routes — blood requests placed by health entities.

Invariants:
    - POST rejects non-positive quantities and past due dates (400)
    - DELETE cascades to the request's blood bags
"""

from fastapi import APIRouter, Depends, status

from bloodbank.api.dependencies import get_services, require
from bloodbank.core.permissions import Operation
from bloodbank.schemas.donations import RequestCreate, RequestRead, RequestUpdate
from bloodbank.services.registry import LifecycleServices

router = APIRouter(prefix="/api/v1/requests", tags=["requests"])


@router.post(
    "", response_model=RequestRead, status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require(Operation.REQUEST_CREATE))],
)
async def create_request(
    body: RequestCreate, services: LifecycleServices = Depends(get_services),
):
    return await services.requests.create(body)


@router.get(
    "", response_model=list[RequestRead],
    dependencies=[Depends(require(Operation.REQUEST_READ_ALL))],
)
async def list_requests(services: LifecycleServices = Depends(get_services)):
    return await services.requests.find_all()


@router.get(
    "/{request_id}", response_model=RequestRead,
    dependencies=[Depends(require(Operation.REQUEST_READ_ONE))],
)
async def get_request(
    request_id: int, services: LifecycleServices = Depends(get_services),
):
    return await services.requests.find_one(request_id)


@router.patch(
    "/{request_id}", response_model=RequestRead,
    dependencies=[Depends(require(Operation.REQUEST_UPDATE))],
)
async def update_request(
    request_id: int, body: RequestUpdate,
    services: LifecycleServices = Depends(get_services),
):
    return await services.requests.update(request_id, body)


@router.delete(
    "/{request_id}",
    dependencies=[Depends(require(Operation.REQUEST_DELETE))],
)
async def delete_request(
    request_id: int, services: LifecycleServices = Depends(get_services),
):
    return {"id": await services.requests.remove(request_id)}
