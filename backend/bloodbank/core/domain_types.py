"""Domain Types — identity wrappers and the closed vocabularies of the blood bank.

Invariants:
    - Authenticated user ids are wrapped in NewType (UserId), not bare ints
    - Blood groups are the fixed product {A, B, AB, O} x {+, -} (8 combinations)
    - All valid states encoded as Enums, no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from itertools import product
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", int)


# ─── Enums ───────────────────────────────────────────────────────

class BloodGroup(str, Enum):
    """ABO group of a blood type."""
    A = "A"
    B = "B"
    AB = "AB"
    O = "O"


class RhFactor(str, Enum):
    """Rh factor of a blood type."""
    POSITIVE = "+"
    NEGATIVE = "-"


class InstitutionType(str, Enum):
    """Kind of health entity, stored in the DB `institution_type` column."""
    CLINIC = "clinic"
    HOSPITAL = "hospital"
    BLOOD_BANK = "bloodBank"

    @classmethod
    def parse(cls, raw: str) -> "InstitutionType | None":
        """Case-insensitive lookup ("HOSPITAL", "bloodbank" both accepted)."""
        wanted = raw.strip().lower()
        for member in cls:
            if member.value.lower() == wanted:
                return member
        return None


class FulfillmentStatus(str, Enum):
    """Delivery state of a request relative to quantity_needed."""
    PENDING = "PENDING"
    PARTIAL = "PARTIAL"
    FULFILLED = "FULFILLED"
    OVERDUE = "OVERDUE"


class GroupBy(str, Enum):
    """Period granularity for donation reports."""
    NONE = "none"
    DAY = "day"
    MONTH = "month"


# ─── Reference Data ──────────────────────────────────────────────

BLOOD_TYPES: tuple[tuple[BloodGroup, RhFactor], ...] = tuple(
    product(BloodGroup, (RhFactor.POSITIVE, RhFactor.NEGATIVE)),
)


def blood_label(group: BloodGroup | str, rh: RhFactor | str) -> str:
    """Human label for a blood type, e.g. 'O+' or 'AB-'."""
    g = group.value if isinstance(group, BloodGroup) else group
    r = rh.value if isinstance(rh, RhFactor) else rh
    return f"{g}{r}"
