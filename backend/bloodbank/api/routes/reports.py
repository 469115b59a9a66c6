"""Report Routes — read-only inventory, fulfillment and activity summaries.

Invariants:
    - Every report requires report_read
    - from/to are inclusive bounds; omitted bounds are open
"""

from datetime import datetime

from fastapi import APIRouter, Depends, Query

from bloodbank.api.dependencies import get_services, require
from bloodbank.core.domain_types import BloodGroup, GroupBy, RhFactor
from bloodbank.core.permissions import Operation
from bloodbank.services.registry import LifecycleServices

router = APIRouter(
    prefix="/api/v1/reports", tags=["reports"],
    dependencies=[Depends(require(Operation.REPORT_READ))],
)


@router.get("/inventory")
async def inventory_report(
    start: datetime | None = Query(None, alias="from"),
    end: datetime | None = Query(None, alias="to"),
    blood_type: BloodGroup | None = Query(None, alias="type"),
    rh: RhFactor | None = Query(None),
    services: LifecycleServices = Depends(get_services),
):
    """Units and bags per blood type."""
    return await services.reports.inventory_by_blood(
        start, end,
        blood_type.value if blood_type else None,
        rh.value if rh else None,
    )


@router.get("/requests")
async def requests_report(
    start: datetime | None = Query(None, alias="from"),
    end: datetime | None = Query(None, alias="to"),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    services: LifecycleServices = Depends(get_services),
):
    return await services.reports.requests_fulfillment(start, end, limit, offset)


@router.get("/requests/overdue")
async def overdue_requests_report(services: LifecycleServices = Depends(get_services)):
    return await services.reports.overdue_requests()


@router.get("/donors")
async def donors_report(
    start: datetime | None = Query(None, alias="from"),
    end: datetime | None = Query(None, alias="to"),
    services: LifecycleServices = Depends(get_services),
):
    return await services.reports.donors_activity(start, end)


@router.get("/health-entities")
async def health_entities_report(
    start: datetime | None = Query(None, alias="from"),
    end: datetime | None = Query(None, alias="to"),
    services: LifecycleServices = Depends(get_services),
):
    return await services.reports.health_entities_summary(start, end)


@router.get("/donations")
async def donations_report(
    start: datetime | None = Query(None, alias="from"),
    end: datetime | None = Query(None, alias="to"),
    group_by: GroupBy = Query(GroupBy.NONE, alias="groupBy"),
    services: LifecycleServices = Depends(get_services),
):
    """Donations per blood type, optionally bucketed by day or month."""
    return await services.reports.donations_by_blood(start, end, group_by)
