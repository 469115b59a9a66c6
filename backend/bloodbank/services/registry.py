"""Lifecycle Services Registry — wires every service to one session and one clock.

Invariants:
    - All services of a registry share the same AsyncSession, so a cascade that
      crosses services runs inside a single transaction
    - Cyclic cascade edges (request ↔ blood bag, donor ↔ blood bag,
      health entity ↔ request) are bound after construction, never imported eagerly
"""

from datetime import datetime, timezone
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from bloodbank.services.blood_bags_service import BloodBagsService
from bloodbank.services.bloods_service import BloodsService
from bloodbank.services.donors_service import DonorsService
from bloodbank.services.health_entities_service import HealthEntitiesService
from bloodbank.services.permissions_service import PermissionsService
from bloodbank.services.reports_service import ReportsService
from bloodbank.services.requests_service import RequestsService
from bloodbank.services.roles_service import RolesService
from bloodbank.services.users_service import UsersService


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class LifecycleServices:
    def __init__(self, db: AsyncSession, clock: Callable[[], datetime] = utc_now):
        self.permissions = PermissionsService(db)
        self.roles = RolesService(db, self.permissions)
        self.users = UsersService(db, self.roles)
        self.bloods = BloodsService(db)
        self.donors = DonorsService(db, self.users, self.bloods)
        self.health_entities = HealthEntitiesService(db, self.users)
        self.requests = RequestsService(
            db, self.bloods, self.health_entities, clock,
        )
        self.blood_bags = BloodBagsService(
            db, self.bloods, self.donors, self.requests, clock,
        )
        self.reports = ReportsService(db, clock)

        self.requests.blood_bags = self.blood_bags
        self.donors.blood_bags = self.blood_bags
        self.health_entities.requests = self.requests
