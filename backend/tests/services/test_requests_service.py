"""Requests Service — creation checks, resolved read views and patch semantics.

Tests cover:
    - create resolves HealthEntity then Blood (NotFound names the missing one)
    - quantity ≤ 0 and due date ≤ now rejected, nothing persisted
    - created record carries a generated id and the resolved Blood/HealthEntity
    - update on a missing id is NotFound; update skips create validators
    - find_all on an empty table is NotFound
"""

from datetime import timedelta

import pytest
from sqlalchemy import func, select

from bloodbank.core.errors import BadRequestError, ResourceNotFoundError
from bloodbank.models.request import Request
from bloodbank.schemas.donations import RequestCreate, RequestUpdate


async def _count(db) -> int:
    return await db.scalar(select(func.count(Request.id)))


async def test_create_returns_resolved_relations(services, make_health_entity, blood_ids, fixed_now):
    entity = await make_health_entity()
    created = await services.requests.create(RequestCreate(
        quantity_needed=10,
        due_date=fixed_now + timedelta(days=7),
        blood_id=blood_ids["O+"],
        health_entity_id=entity.id,
    ))

    assert created.id is not None
    assert created.quantity_needed == 10
    assert created.blood.label == "O+"
    assert created.health_entity.id == entity.id
    assert created.health_entity.name == entity.name


async def test_create_stamps_date_created_from_clock(services, make_health_entity, make_request, fixed_now):
    entity = await make_health_entity()
    created = await make_request(entity.id)
    fetched = await services.requests.find_one(created.id)
    assert fetched.date_created.replace(tzinfo=None) == fixed_now.replace(tzinfo=None)


@pytest.mark.parametrize("quantity", [0, -5])
async def test_non_positive_quantity_rejected(services, make_health_entity, blood_ids, test_db, quantity, fixed_now):
    entity = await make_health_entity()
    with pytest.raises(BadRequestError, match="Quantity must be greater than zero"):
        await services.requests.create(RequestCreate(
            quantity_needed=quantity,
            due_date=fixed_now + timedelta(days=7),
            blood_id=blood_ids["O+"],
            health_entity_id=entity.id,
        ))
    assert await _count(test_db) == 0


@pytest.mark.parametrize("offset", [timedelta(0), -timedelta(days=1)])
async def test_due_date_not_in_future_rejected(services, make_health_entity, blood_ids, test_db, offset, fixed_now):
    entity = await make_health_entity()
    with pytest.raises(BadRequestError, match="Due date must be a future date"):
        await services.requests.create(RequestCreate(
            quantity_needed=10,
            due_date=fixed_now + offset,
            blood_id=blood_ids["O+"],
            health_entity_id=entity.id,
        ))
    assert await _count(test_db) == 0


async def test_quantity_checked_before_due_date(services, make_health_entity, blood_ids, fixed_now):
    entity = await make_health_entity()
    with pytest.raises(BadRequestError, match="Quantity"):
        await services.requests.create(RequestCreate(
            quantity_needed=0,
            due_date=fixed_now - timedelta(days=1),
            blood_id=blood_ids["O+"],
            health_entity_id=entity.id,
        ))


async def test_missing_health_entity_checked_before_blood(services, fixed_now):
    with pytest.raises(ResourceNotFoundError, match="Health entity not found"):
        await services.requests.create(RequestCreate(
            quantity_needed=10,
            due_date=fixed_now + timedelta(days=7),
            blood_id=999,
            health_entity_id=999,
        ))


async def test_missing_blood_is_not_found(services, make_health_entity, fixed_now):
    entity = await make_health_entity()
    with pytest.raises(ResourceNotFoundError, match="Blood type not found"):
        await services.requests.create(RequestCreate(
            quantity_needed=10,
            due_date=fixed_now + timedelta(days=7),
            blood_id=999,
            health_entity_id=entity.id,
        ))


async def test_find_all_on_empty_table_is_not_found(services):
    with pytest.raises(ResourceNotFoundError, match="No requests found"):
        await services.requests.find_all()


async def test_find_all_resolves_every_request(services, make_health_entity, make_request):
    entity = await make_health_entity()
    await make_request(entity.id, blood="O+")
    await make_request(entity.id, blood="A-")

    requests = await services.requests.find_all()
    assert [r.blood.label for r in requests] == ["O+", "A-"]


async def test_update_missing_id_is_not_found(services):
    with pytest.raises(ResourceNotFoundError, match="Request not updated"):
        await services.requests.update(999, RequestUpdate(quantity_needed=3))


async def test_update_patches_and_refetches(services, make_health_entity, make_request):
    entity = await make_health_entity()
    created = await make_request(entity.id, quantity=10)

    updated = await services.requests.update(created.id, RequestUpdate(quantity_needed=25))
    assert updated.quantity_needed == 25
    assert updated.health_entity.id == entity.id


async def test_update_does_not_revalidate(services, make_health_entity, make_request):
    entity = await make_health_entity()
    created = await make_request(entity.id)

    updated = await services.requests.update(created.id, RequestUpdate(quantity_needed=0))
    assert updated.quantity_needed == 0


async def test_find_by_health_entity_id(services, make_health_entity, make_request):
    first = await make_health_entity()
    second = await make_health_entity()
    await make_request(first.id)
    await make_request(first.id)
    await make_request(second.id)

    assert len(await services.requests.find_by_health_entity_id(first.id)) == 2
    assert await services.requests.find_by_health_entity_id(12345) == []
