"""Health Entity Routes — hospitals, clinics and blood banks.

Invariants:
    - DELETE cascades to requests, their blood bags and the backing user
"""

from fastapi import APIRouter, Depends, status

from bloodbank.api.dependencies import get_services, require
from bloodbank.core.permissions import Operation
from bloodbank.schemas.donations import (
    HealthEntityCreate, HealthEntityRead, HealthEntityUpdate, RequestRead,
)
from bloodbank.services.registry import LifecycleServices

router = APIRouter(prefix="/api/v1/health-entities", tags=["health-entities"])


@router.post(
    "", response_model=HealthEntityRead, status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require(Operation.HEALTH_ENTITY_CREATE))],
)
async def create_health_entity(
    body: HealthEntityCreate, services: LifecycleServices = Depends(get_services),
):
    return await services.health_entities.create(body)


@router.get(
    "", response_model=list[HealthEntityRead],
    dependencies=[Depends(require(Operation.HEALTH_ENTITY_READ_ALL))],
)
async def list_health_entities(services: LifecycleServices = Depends(get_services)):
    return await services.health_entities.find_all()


@router.get(
    "/{entity_id}", response_model=HealthEntityRead,
    dependencies=[Depends(require(Operation.HEALTH_ENTITY_READ_ONE))],
)
async def get_health_entity(
    entity_id: int, services: LifecycleServices = Depends(get_services),
):
    return await services.health_entities.find_one(entity_id)


@router.get(
    "/{entity_id}/requests", response_model=list[RequestRead],
    dependencies=[Depends(require(Operation.REQUEST_READ_ALL))],
)
async def list_health_entity_requests(
    entity_id: int, services: LifecycleServices = Depends(get_services),
):
    """Requests placed by one entity (empty list when none)."""
    await services.health_entities.find_one(entity_id)
    return await services.requests.find_by_health_entity_id(entity_id)


@router.patch(
    "/{entity_id}", response_model=HealthEntityRead,
    dependencies=[Depends(require(Operation.HEALTH_ENTITY_UPDATE))],
)
async def update_health_entity(
    entity_id: int, body: HealthEntityUpdate,
    services: LifecycleServices = Depends(get_services),
):
    return await services.health_entities.update(entity_id, body)


@router.delete(
    "/{entity_id}",
    dependencies=[Depends(require(Operation.HEALTH_ENTITY_DELETE))],
)
async def delete_health_entity(
    entity_id: int, services: LifecycleServices = Depends(get_services),
):
    return {"id": await services.health_entities.remove(entity_id)}
