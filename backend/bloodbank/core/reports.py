"""Report Aggregations — inventory, fulfillment and activity summaries over flat facts.

Invariants:
    - All functions are PURE: inputs are immutable facts, outputs are plain dicts
    - Time-range bounds are inclusive; a missing bound is open
    - Percentages are integers in [0, 100], rounded half up
    - Output ordering is deterministic (explicit sort keys, ties broken by id)

Design Decisions:
    - Facts are flat dataclasses built by the reports service from one joined
      query each: no lazy relation walking inside the aggregation loops
"""

from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime

from bloodbank.core.domain_types import FulfillmentStatus, GroupBy, blood_label
from bloodbank.core.validators import as_utc


@dataclass(frozen=True)
class BagFact:
    bag_id: int
    quantity: int
    donation_date: datetime
    blood_type: str
    rh: str
    donor_id: int | None
    request_id: int | None
    health_entity_id: int | None


@dataclass(frozen=True)
class RequestFact:
    request_id: int
    quantity_needed: int
    date_created: datetime
    due_date: datetime
    blood_type: str
    rh: str
    health_entity_id: int
    health_entity_name: str


@dataclass(frozen=True)
class DonorFact:
    donor_id: int
    name: str
    document: str


def in_range(
    value: datetime, start: datetime | None = None, end: datetime | None = None,
) -> bool:
    """Inclusive range check with open bounds."""
    moment = as_utc(value)
    if start is not None and moment < as_utc(start):
        return False
    if end is not None and moment > as_utc(end):
        return False
    return True


def _percent(part: int, whole: int) -> int:
    if whole <= 0:
        return 100
    return min(100, int(part * 100 / whole + 0.5))


def _delivered_by_request(bags: list[BagFact]) -> dict[int, int]:
    delivered: dict[int, int] = defaultdict(int)
    for bag in bags:
        if bag.request_id is not None:
            delivered[bag.request_id] += bag.quantity
    return delivered


def fulfillment_status(delivered: int, needed: int) -> FulfillmentStatus:
    if delivered >= needed:
        return FulfillmentStatus.FULFILLED
    if delivered > 0:
        return FulfillmentStatus.PARTIAL
    return FulfillmentStatus.PENDING


# ─── Inventory ───────────────────────────────────────────────────

def inventory_by_blood(
    bags: list[BagFact],
    start: datetime | None = None,
    end: datetime | None = None,
    blood_type: str | None = None,
    rh: str | None = None,
) -> list[dict]:
    """Units and bag count per blood type, optionally filtered."""
    totals: dict[tuple[str, str], dict] = {}
    for bag in bags:
        if not in_range(bag.donation_date, start, end):
            continue
        if blood_type and bag.blood_type != blood_type:
            continue
        if rh and bag.rh != rh:
            continue
        row = totals.setdefault(
            (bag.blood_type, bag.rh),
            {"type": bag.blood_type, "rh": bag.rh, "units": 0, "bags": 0},
        )
        row["units"] += bag.quantity
        row["bags"] += 1
    return [totals[key] for key in sorted(totals)]


# ─── Requests ────────────────────────────────────────────────────

def requests_fulfillment(
    requests: list[RequestFact],
    bags: list[BagFact],
    start: datetime | None = None,
    end: datetime | None = None,
    limit: int = 20,
    offset: int = 0,
) -> dict:
    """Delivered vs needed per request, soonest due and least fulfilled first."""
    in_window = [b for b in bags if in_range(b.donation_date, start, end)]
    delivered_map = _delivered_by_request(in_window)

    rows = []
    for req in requests:
        if not in_range(req.date_created, start, end):
            continue
        delivered = delivered_map.get(req.request_id, 0)
        rows.append({
            "request_id": req.request_id,
            "blood": blood_label(req.blood_type, req.rh),
            "health_entity_id": req.health_entity_id,
            "created_at": req.date_created,
            "due_date": req.due_date,
            "needed": req.quantity_needed,
            "delivered": delivered,
            "fulfillment": _percent(delivered, req.quantity_needed),
            "status": fulfillment_status(delivered, req.quantity_needed).value,
        })

    rows.sort(key=lambda r: (as_utc(r["due_date"]), r["fulfillment"], r["request_id"]))
    return {
        "total": len(rows),
        "limit": limit,
        "offset": offset,
        "items": rows[offset:offset + limit],
    }


def overdue_requests(
    requests: list[RequestFact], bags: list[BagFact], now: datetime,
) -> list[dict]:
    """Requests past their due date that are still short of units."""
    delivered_map = _delivered_by_request(bags)
    items = []
    for req in requests:
        if as_utc(req.due_date) >= as_utc(now):
            continue
        delivered = delivered_map.get(req.request_id, 0)
        if delivered >= req.quantity_needed:
            continue
        items.append({
            "request_id": req.request_id,
            "health_entity": req.health_entity_name,
            "blood": blood_label(req.blood_type, req.rh),
            "due_date": req.due_date,
            "needed": req.quantity_needed,
            "delivered": delivered,
            "shortage": req.quantity_needed - delivered,
            "status": FulfillmentStatus.OVERDUE.value,
        })
    items.sort(key=lambda r: (as_utc(r["due_date"]), r["request_id"]))
    return items


# ─── Donors & Health Entities ────────────────────────────────────

def donors_activity(
    donors: list[DonorFact],
    bags: list[BagFact],
    start: datetime | None = None,
    end: datetime | None = None,
) -> list[dict]:
    """Donations and units per donor, most units first. Donors with no bags included."""
    by_donor = {
        d.donor_id: {
            "donor_id": d.donor_id, "name": d.name, "document": d.document,
            "donations": 0, "units": 0,
        }
        for d in donors
    }
    for bag in bags:
        if not in_range(bag.donation_date, start, end):
            continue
        row = by_donor.get(bag.donor_id) if bag.donor_id is not None else None
        if row is not None:
            row["donations"] += 1
            row["units"] += bag.quantity
    return sorted(by_donor.values(), key=lambda r: (-r["units"], r["donor_id"]))


def health_entities_summary(
    requests: list[RequestFact],
    bags: list[BagFact],
    start: datetime | None = None,
    end: datetime | None = None,
) -> list[dict]:
    """Requested vs received units per health entity, least fulfilled first."""
    by_entity: dict[int, dict] = {}
    for req in requests:
        if not in_range(req.date_created, start, end):
            continue
        row = by_entity.setdefault(req.health_entity_id, {
            "health_entity_id": req.health_entity_id,
            "name": req.health_entity_name,
            "requests": 0, "units_requested": 0,
            "bags_received": 0, "units_received": 0,
            "fulfillment_pct": 0,
        })
        row["requests"] += 1
        row["units_requested"] += req.quantity_needed

    for bag in bags:
        if bag.health_entity_id is None:
            continue
        if not in_range(bag.donation_date, start, end):
            continue
        row = by_entity.get(bag.health_entity_id)
        if row is not None:
            row["bags_received"] += 1
            row["units_received"] += bag.quantity

    for row in by_entity.values():
        if row["units_requested"]:
            row["fulfillment_pct"] = _percent(
                row["units_received"], row["units_requested"],
            )
    return sorted(
        by_entity.values(),
        key=lambda r: (r["fulfillment_pct"], r["health_entity_id"]),
    )


# ─── Donations ───────────────────────────────────────────────────

def _period_key(moment: datetime, group_by: GroupBy) -> str:
    if group_by is GroupBy.DAY:
        return as_utc(moment).strftime("%Y-%m-%d")
    if group_by is GroupBy.MONTH:
        return as_utc(moment).strftime("%Y-%m")
    return "all"


def donations_by_blood(
    bags: list[BagFact],
    start: datetime | None = None,
    end: datetime | None = None,
    group_by: GroupBy = GroupBy.NONE,
) -> list[dict]:
    """Donations and units per blood type, optionally bucketed by day or month.

    With GroupBy.NONE returns the flat per-type rows; otherwise a list of
    {"period": ..., "items": [...]} sorted by period.
    """
    periods: dict[str, dict[tuple[str, str], dict]] = defaultdict(dict)
    for bag in bags:
        if not in_range(bag.donation_date, start, end):
            continue
        bucket = periods[_period_key(bag.donation_date, group_by)]
        row = bucket.setdefault(
            (bag.blood_type, bag.rh),
            {"type": bag.blood_type, "rh": bag.rh, "donations": 0, "units": 0},
        )
        row["donations"] += 1
        row["units"] += bag.quantity

    if group_by is GroupBy.NONE:
        bucket = periods.get("all", {})
        return [bucket[key] for key in sorted(bucket)]

    return [
        {"period": period, "items": [rows[key] for key in sorted(rows)]}
        for period, rows in sorted(periods.items())
    ]
