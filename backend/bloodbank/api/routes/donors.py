"""Donor Routes — donor profile CRUD.

Invariants:
    - DELETE cascades to the donor's blood bags and its backing user (DonorsService)
"""

from fastapi import APIRouter, Depends, status

from bloodbank.api.dependencies import get_services, require
from bloodbank.core.permissions import Operation
from bloodbank.schemas.donations import DonorCreate, DonorRead, DonorUpdate
from bloodbank.services.registry import LifecycleServices

router = APIRouter(prefix="/api/v1/donors", tags=["donors"])


@router.post(
    "", response_model=DonorRead, status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require(Operation.DONOR_CREATE))],
)
async def create_donor(
    body: DonorCreate, services: LifecycleServices = Depends(get_services),
):
    return await services.donors.create(body)


@router.get(
    "", response_model=list[DonorRead],
    dependencies=[Depends(require(Operation.DONOR_READ_ALL))],
)
async def list_donors(services: LifecycleServices = Depends(get_services)):
    return await services.donors.find_all()


@router.get(
    "/{donor_id}", response_model=DonorRead,
    dependencies=[Depends(require(Operation.DONOR_READ_ONE))],
)
async def get_donor(donor_id: int, services: LifecycleServices = Depends(get_services)):
    return await services.donors.find_one(donor_id)


@router.patch(
    "/{donor_id}", response_model=DonorRead,
    dependencies=[Depends(require(Operation.DONOR_UPDATE))],
)
async def update_donor(
    donor_id: int, body: DonorUpdate,
    services: LifecycleServices = Depends(get_services),
):
    return await services.donors.update(donor_id, body)


@router.delete(
    "/{donor_id}",
    dependencies=[Depends(require(Operation.DONOR_DELETE))],
)
async def delete_donor(donor_id: int, services: LifecycleServices = Depends(get_services)):
    return {"id": await services.donors.remove(donor_id)}
