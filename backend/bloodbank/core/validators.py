"""Domain Validators — pure precondition checks run before any persistence write.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Return a Violation on failure, None on success
    - first_violation chains checks; first error wins
    - "Now" is always an argument; a date equal to now is NOT in the future

Design Decisions:
    - Return values (not exceptions): callers decide how to surface the failure,
      the lifecycle services turn it into BadRequestError
    - Naive datetimes are interpreted as UTC (SQLite drops tzinfo on read)
"""

from datetime import datetime, timezone
from enum import Enum


class Violation(str, Enum):
    """Distinct failure reason of a domain validator."""
    QUANTITY_NOT_POSITIVE = "quantity_not_positive"
    DATE_NOT_IN_FUTURE = "date_not_in_future"
    BLOOD_TYPE_MISMATCH = "blood_type_mismatch"


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes; convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def check_positive_quantity(quantity: int) -> Violation | None:
    """Quantity must be strictly greater than zero."""
    if quantity <= 0:
        return Violation.QUANTITY_NOT_POSITIVE
    return None


def check_future_date(value: datetime, reference_now: datetime) -> Violation | None:
    """Date must be strictly after reference_now."""
    if as_utc(value) <= as_utc(reference_now):
        return Violation.DATE_NOT_IN_FUTURE
    return None


def check_blood_type_matches(
    bag_blood_id: int, request_blood_id: int,
) -> Violation | None:
    """Blood bag and request must reference the same Blood row."""
    if bag_blood_id != request_blood_id:
        return Violation.BLOOD_TYPE_MISMATCH
    return None


def first_violation(*results: Violation | None) -> Violation | None:
    """First non-None result, or None when every check passed."""
    for result in results:
        if result is not None:
            return result
    return None


def violation_message(violation: Violation, subject: str = "Date") -> str:
    """User-facing message. `subject` names the date field ('Due date', 'Expiration date')."""
    if violation is Violation.QUANTITY_NOT_POSITIVE:
        return "Quantity must be greater than zero"
    if violation is Violation.DATE_NOT_IN_FUTURE:
        return f"{subject} must be a future date"
    return "Blood type does not match the request"
