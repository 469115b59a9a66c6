"""Blood Bags Service — reference order, validator order and blood-type matching.

Tests cover:
    - Blood, then Donor, then Request resolved in that order
    - quantity → expiration date → blood match, first failure wins, no row written
    - mismatched blood type rejected; matching bag created with resolved relations
    - donation_date defaults to the clock
"""

from datetime import timedelta

import pytest
from sqlalchemy import func, select

from bloodbank.core.errors import BadRequestError, ResourceNotFoundError
from bloodbank.models.blood_bag import BloodBag
from bloodbank.schemas.donations import BloodBagCreate, BloodBagUpdate


@pytest.fixture
async def request_and_donor(make_health_entity, make_request, make_donor):
    entity = await make_health_entity()
    request = await make_request(entity.id, blood="O+")
    donor = await make_donor(blood="O+")
    return request, donor


@pytest.fixture
def body(fixed_now):
    """Build a BloodBagCreate expiring 30 days after the clock."""
    def _build(request_id, donor_id, blood_id, **overrides) -> BloodBagCreate:
        fields = {
            "quantity": 450,
            "expiration_date": fixed_now + timedelta(days=30),
            "request_id": request_id,
            "blood_id": blood_id,
            "donor_id": donor_id,
        }
        fields.update(overrides)
        return BloodBagCreate(**fields)

    return _build


async def _count(db) -> int:
    return await db.scalar(select(func.count(BloodBag.id)))


async def test_create_matching_bag(services, request_and_donor, blood_ids, body):
    request, donor = request_and_donor
    bag = await services.blood_bags.create(body(request.id, donor.id, blood_ids["O+"]))

    assert bag.id is not None
    assert bag.blood.label == "O+"
    assert bag.donor.id == donor.id
    assert bag.request.id == request.id
    assert bag.request.health_entity.id == request.health_entity.id


async def test_donation_date_defaults_to_now(services, request_and_donor, blood_ids, body, fixed_now):
    request, donor = request_and_donor
    bag = await services.blood_bags.create(body(request.id, donor.id, blood_ids["O+"]))
    assert bag.donation_date == fixed_now


async def test_mismatched_blood_type_rejected(services, request_and_donor, blood_ids, body, test_db):
    request, donor = request_and_donor
    with pytest.raises(BadRequestError, match="Blood type does not match the request"):
        await services.blood_bags.create(body(request.id, donor.id, blood_ids["A+"]))
    assert await _count(test_db) == 0


@pytest.mark.parametrize("quantity", [0, -450])
async def test_non_positive_quantity_rejected(
    services, request_and_donor, blood_ids, body, test_db, quantity,
):
    request, donor = request_and_donor
    with pytest.raises(BadRequestError, match="Quantity must be greater than zero"):
        await services.blood_bags.create(
            body(request.id, donor.id, blood_ids["O+"], quantity=quantity),
        )
    assert await _count(test_db) == 0


async def test_expiration_equal_to_now_rejected(
    services, request_and_donor, blood_ids, body, test_db, fixed_now,
):
    request, donor = request_and_donor
    with pytest.raises(BadRequestError, match="Expiration date must be a future date"):
        await services.blood_bags.create(
            body(request.id, donor.id, blood_ids["O+"], expiration_date=fixed_now),
        )
    assert await _count(test_db) == 0


async def test_expiration_checked_before_blood_match(
    services, request_and_donor, blood_ids, body, fixed_now,
):
    request, donor = request_and_donor
    with pytest.raises(BadRequestError, match="Expiration date"):
        await services.blood_bags.create(body(
            request.id, donor.id, blood_ids["A+"],
            expiration_date=fixed_now - timedelta(days=1),
        ))


async def test_missing_blood_reported_before_donor_and_request(services, body):
    with pytest.raises(ResourceNotFoundError, match="Blood type not found"):
        await services.blood_bags.create(body(999, 999, 999))


async def test_missing_donor_reported_before_request(services, blood_ids, body):
    with pytest.raises(ResourceNotFoundError, match="Donor not found"):
        await services.blood_bags.create(body(999, 999, blood_ids["O+"]))


async def test_missing_request_is_not_found(services, request_and_donor, blood_ids, body):
    _, donor = request_and_donor
    with pytest.raises(ResourceNotFoundError, match="Request not found"):
        await services.blood_bags.create(body(999, donor.id, blood_ids["O+"]))


async def test_find_all_on_empty_table_is_not_found(services):
    with pytest.raises(ResourceNotFoundError, match="No blood bags found"):
        await services.blood_bags.find_all()


async def test_find_all_resolves_relations(services, request_and_donor, make_bag):
    request, donor = request_and_donor
    await make_bag(request.id, donor.id)
    await make_bag(request.id, donor.id, quantity=300)

    bags = await services.blood_bags.find_all()
    assert [b.quantity for b in bags] == [450, 300]
    assert all(b.request.id == request.id for b in bags)


async def test_update_missing_is_not_found(services):
    with pytest.raises(ResourceNotFoundError, match="Blood bag not updated"):
        await services.blood_bags.update(999, BloodBagUpdate(quantity=1))


async def test_update_refetches(services, request_and_donor, make_bag):
    request, donor = request_and_donor
    bag = await make_bag(request.id, donor.id)
    updated = await services.blood_bags.update(bag.id, BloodBagUpdate(quantity=200))
    assert updated.quantity == 200


async def test_remove_returns_id_then_not_found(services, request_and_donor, make_bag):
    request, donor = request_and_donor
    bag = await make_bag(request.id, donor.id)

    assert await services.blood_bags.remove(bag.id) == bag.id
    with pytest.raises(ResourceNotFoundError, match="Blood bag not deleted"):
        await services.blood_bags.remove(bag.id)


async def test_remove_by_request_id_with_no_children_is_zero(services):
    assert await services.blood_bags.remove_by_request_id(12345) == 0
