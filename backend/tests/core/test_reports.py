"""Report Aggregations — tests for the pure inventory and fulfillment summaries.

Tests cover:
    - inventory_by_blood: grouping, type/rh filters, inclusive date range
    - requests_fulfillment: status per request, ordering, pagination
    - overdue_requests: only past-due and short
    - donors_activity / health_entities_summary: totals and ordering
    - donations_by_blood: flat and period-bucketed output
"""

from datetime import datetime, timezone

from bloodbank.core.domain_types import FulfillmentStatus, GroupBy
from bloodbank.core.reports import (
    BagFact,
    DonorFact,
    RequestFact,
    donations_by_blood,
    donors_activity,
    fulfillment_status,
    health_entities_summary,
    in_range,
    inventory_by_blood,
    overdue_requests,
    requests_fulfillment,
)


def _at(day: int, month: int = 3) -> datetime:
    return datetime(2026, month, day, 9, 0, tzinfo=timezone.utc)


def _bag(bag_id, quantity, day, blood="O", rh="+", donor=1, request=1, entity=1, month=3):
    return BagFact(
        bag_id=bag_id, quantity=quantity, donation_date=_at(day, month),
        blood_type=blood, rh=rh, donor_id=donor, request_id=request,
        health_entity_id=entity,
    )


def _request(request_id, needed, due_day, created_day=1, blood="O", rh="+", entity=1):
    return RequestFact(
        request_id=request_id, quantity_needed=needed,
        date_created=_at(created_day), due_date=_at(due_day),
        blood_type=blood, rh=rh, health_entity_id=entity,
        health_entity_name=f"Entity {entity}",
    )


# ─── Helpers ─────────────────────────────────────────────────────

def test_in_range_is_inclusive_and_open_ended():
    assert in_range(_at(5), _at(5), _at(5))
    assert in_range(_at(5))
    assert not in_range(_at(4), start=_at(5))
    assert not in_range(_at(6), end=_at(5))


def test_fulfillment_status():
    assert fulfillment_status(0, 10) is FulfillmentStatus.PENDING
    assert fulfillment_status(4, 10) is FulfillmentStatus.PARTIAL
    assert fulfillment_status(10, 10) is FulfillmentStatus.FULFILLED
    assert fulfillment_status(12, 10) is FulfillmentStatus.FULFILLED


# ─── Inventory ───────────────────────────────────────────────────

def test_inventory_groups_by_blood_type():
    bags = [
        _bag(1, 450, 2), _bag(2, 300, 3),
        _bag(3, 200, 3, blood="A", rh="-"),
    ]
    rows = inventory_by_blood(bags)
    assert rows == [
        {"type": "A", "rh": "-", "units": 200, "bags": 1},
        {"type": "O", "rh": "+", "units": 750, "bags": 2},
    ]


def test_inventory_filters_by_type_rh_and_range():
    bags = [
        _bag(1, 450, 2), _bag(2, 300, 10),
        _bag(3, 200, 3, rh="-"),
    ]
    rows = inventory_by_blood(bags, start=_at(1), end=_at(5), blood_type="O", rh="+")
    assert rows == [{"type": "O", "rh": "+", "units": 450, "bags": 1}]


# ─── Requests ────────────────────────────────────────────────────

def test_requests_fulfillment_statuses_and_order():
    requests = [
        _request(1, 10, due_day=20),
        _request(2, 10, due_day=10),
        _request(3, 10, due_day=10),
    ]
    bags = [
        _bag(1, 10, 2, request=1),
        _bag(2, 4, 2, request=3),
    ]
    report = requests_fulfillment(requests, bags)

    assert report["total"] == 3
    ids = [r["request_id"] for r in report["items"]]
    # same due date: least fulfilled first
    assert ids == [2, 3, 1]
    by_id = {r["request_id"]: r for r in report["items"]}
    assert by_id[1]["status"] == "FULFILLED"
    assert by_id[1]["fulfillment"] == 100
    assert by_id[3]["status"] == "PARTIAL"
    assert by_id[3]["fulfillment"] == 40
    assert by_id[2]["status"] == "PENDING"
    assert by_id[2]["delivered"] == 0


def test_requests_fulfillment_paginates():
    requests = [_request(i, 5, due_day=10 + i) for i in range(1, 6)]
    report = requests_fulfillment(requests, [], limit=2, offset=2)
    assert report["total"] == 5
    assert [r["request_id"] for r in report["items"]] == [3, 4]
    assert report["limit"] == 2
    assert report["offset"] == 2


def test_fulfillment_percent_is_capped_at_100():
    report = requests_fulfillment([_request(1, 3, due_day=10)], [_bag(1, 9, 2)])
    assert report["items"][0]["fulfillment"] == 100


def test_overdue_requests_only_past_due_and_short():
    requests = [
        _request(1, 10, due_day=5),
        _request(2, 10, due_day=5),
        _request(3, 10, due_day=25),
    ]
    bags = [_bag(1, 10, 2, request=2), _bag(2, 3, 2, request=1)]
    items = overdue_requests(requests, bags, now=_at(15))

    assert [i["request_id"] for i in items] == [1]
    assert items[0]["shortage"] == 7
    assert items[0]["status"] == "OVERDUE"
    assert items[0]["health_entity"] == "Entity 1"


# ─── Donors & Health Entities ────────────────────────────────────

def test_donors_activity_includes_idle_donors_sorted_by_units():
    donors = [
        DonorFact(1, "Ana Gomez", "D1"),
        DonorFact(2, "Luis Perez", "D2"),
        DonorFact(3, "Eva Ruiz", "D3"),
    ]
    bags = [_bag(1, 300, 2, donor=1), _bag(2, 450, 3, donor=2), _bag(3, 450, 4, donor=2)]
    rows = donors_activity(donors, bags)

    assert [r["donor_id"] for r in rows] == [2, 1, 3]
    assert rows[0]["donations"] == 2
    assert rows[0]["units"] == 900
    assert rows[2]["donations"] == 0


def test_health_entities_summary_least_fulfilled_first():
    requests = [
        _request(1, 10, due_day=20, entity=1),
        _request(2, 10, due_day=20, entity=2),
    ]
    bags = [_bag(1, 10, 2, request=1, entity=1), _bag(2, 5, 2, request=2, entity=2)]
    rows = health_entities_summary(requests, bags)

    assert [r["health_entity_id"] for r in rows] == [2, 1]
    assert rows[0]["fulfillment_pct"] == 50
    assert rows[0]["units_received"] == 5
    assert rows[1]["fulfillment_pct"] == 100
    assert rows[1]["bags_received"] == 1


# ─── Donations ───────────────────────────────────────────────────

def test_donations_flat():
    bags = [_bag(1, 450, 2), _bag(2, 450, 3), _bag(3, 200, 3, blood="B")]
    rows = donations_by_blood(bags)
    assert rows == [
        {"type": "B", "rh": "+", "donations": 1, "units": 200},
        {"type": "O", "rh": "+", "donations": 2, "units": 900},
    ]


def test_donations_grouped_by_month():
    bags = [_bag(1, 450, 2, month=2), _bag(2, 450, 3, month=3), _bag(3, 100, 4, month=3)]
    periods = donations_by_blood(bags, group_by=GroupBy.MONTH)
    assert [p["period"] for p in periods] == ["2026-02", "2026-03"]
    assert periods[1]["items"] == [{"type": "O", "rh": "+", "donations": 2, "units": 550}]


def test_donations_grouped_by_day():
    bags = [_bag(1, 450, 2), _bag(2, 450, 2), _bag(3, 100, 4)]
    periods = donations_by_blood(bags, group_by=GroupBy.DAY)
    assert [p["period"] for p in periods] == ["2026-03-02", "2026-03-04"]
