"""Blood Bag Routes — donation units delivered against requests."""

from fastapi import APIRouter, Depends, status

from bloodbank.api.dependencies import get_services, require
from bloodbank.core.permissions import Operation
from bloodbank.schemas.donations import BloodBagCreate, BloodBagRead, BloodBagUpdate
from bloodbank.services.registry import LifecycleServices

router = APIRouter(prefix="/api/v1/blood-bags", tags=["blood-bags"])


@router.post(
    "", response_model=BloodBagRead, status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require(Operation.BLOOD_BAG_CREATE))],
)
async def create_blood_bag(
    body: BloodBagCreate, services: LifecycleServices = Depends(get_services),
):
    return await services.blood_bags.create(body)


@router.get(
    "", response_model=list[BloodBagRead],
    dependencies=[Depends(require(Operation.BLOOD_BAG_READ_ALL))],
)
async def list_blood_bags(services: LifecycleServices = Depends(get_services)):
    return await services.blood_bags.find_all()


@router.get(
    "/{bag_id}", response_model=BloodBagRead,
    dependencies=[Depends(require(Operation.BLOOD_BAG_READ_ONE))],
)
async def get_blood_bag(bag_id: int, services: LifecycleServices = Depends(get_services)):
    return await services.blood_bags.find_one(bag_id)


@router.patch(
    "/{bag_id}", response_model=BloodBagRead,
    dependencies=[Depends(require(Operation.BLOOD_BAG_UPDATE))],
)
async def update_blood_bag(
    bag_id: int, body: BloodBagUpdate,
    services: LifecycleServices = Depends(get_services),
):
    return await services.blood_bags.update(bag_id, body)


@router.delete(
    "/{bag_id}",
    dependencies=[Depends(require(Operation.BLOOD_BAG_DELETE))],
)
async def delete_blood_bag(bag_id: int, services: LifecycleServices = Depends(get_services)):
    return {"id": await services.blood_bags.remove(bag_id)}
