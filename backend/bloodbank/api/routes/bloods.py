"""Blood Routes — read-only catalogue of the 8 blood types."""

from fastapi import APIRouter, Depends

from bloodbank.api.dependencies import get_services, require
from bloodbank.core.permissions import Operation
from bloodbank.schemas.donations import BloodRead
from bloodbank.services.registry import LifecycleServices

router = APIRouter(prefix="/api/v1/bloods", tags=["bloods"])


@router.get(
    "", response_model=list[BloodRead],
    dependencies=[Depends(require(Operation.BLOOD_READ_ALL))],
)
async def list_bloods(services: LifecycleServices = Depends(get_services)):
    return await services.bloods.find_all()


@router.get(
    "/{blood_id}", response_model=BloodRead,
    dependencies=[Depends(require(Operation.BLOOD_READ_ONE))],
)
async def get_blood(blood_id: int, services: LifecycleServices = Depends(get_services)):
    return await services.bloods.find_one(blood_id)
