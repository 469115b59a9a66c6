"""ORM Models — SQLAlchemy declarative rows for every blood bank entity.

Invariants:
    - All models inherit from Base (db/base.py)
    - Relations stored as foreign-key ids only; no relationship() graphs, no eager loading
    - No ON DELETE CASCADE: dependent cleanup is owned by the lifecycle services

Design Decisions:
    - One file per entity family for locality
    - All models imported here so Base.metadata is complete before create_all / autogenerate
"""

from bloodbank.models.permission import Permission  # noqa: F401
from bloodbank.models.role import Role, role_permissions  # noqa: F401
from bloodbank.models.user import User  # noqa: F401
from bloodbank.models.blood import Blood  # noqa: F401
from bloodbank.models.donor import Donor  # noqa: F401
from bloodbank.models.health_entity import HealthEntity  # noqa: F401
from bloodbank.models.request import Request  # noqa: F401
from bloodbank.models.blood_bag import BloodBag  # noqa: F401
