"""Domain Validators — tests for the pure pre-persistence checks.

Tests cover:
    - Quantity: strictly positive passes, zero and negatives fail
    - Future date: strictly later passes, equal-to-now and past fail
    - Naive datetimes compared as UTC
    - Blood type match and first-violation ordering
    - User-facing messages
"""

from datetime import datetime, timedelta, timezone

import pytest

from bloodbank.core.validators import (
    Violation,
    as_utc,
    check_blood_type_matches,
    check_future_date,
    check_positive_quantity,
    first_violation,
    violation_message,
)

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


# ─── check_positive_quantity ─────────────────────────────────────

@pytest.mark.parametrize("quantity", [1, 2, 450, 10_000])
def test_positive_quantity_passes(quantity):
    assert check_positive_quantity(quantity) is None


@pytest.mark.parametrize("quantity", [0, -1, -450])
def test_non_positive_quantity_fails(quantity):
    assert check_positive_quantity(quantity) is Violation.QUANTITY_NOT_POSITIVE


# ─── check_future_date ───────────────────────────────────────────

def test_future_date_passes():
    assert check_future_date(NOW + timedelta(seconds=1), NOW) is None


def test_date_equal_to_now_fails():
    assert check_future_date(NOW, NOW) is Violation.DATE_NOT_IN_FUTURE


def test_past_date_fails():
    assert check_future_date(NOW - timedelta(days=1), NOW) is Violation.DATE_NOT_IN_FUTURE


def test_naive_date_is_treated_as_utc():
    naive_future = datetime(2026, 3, 1, 12, 0, 1)
    assert check_future_date(naive_future, NOW) is None
    assert check_future_date(datetime(2026, 3, 1, 12, 0), NOW) is Violation.DATE_NOT_IN_FUTURE


def test_offset_dates_compared_in_utc():
    bogota = timezone(timedelta(hours=-5))
    same_instant = datetime(2026, 3, 1, 7, 0, tzinfo=bogota)
    assert check_future_date(same_instant, NOW) is Violation.DATE_NOT_IN_FUTURE
    assert as_utc(same_instant) == NOW


# ─── check_blood_type_matches ────────────────────────────────────

def test_same_blood_passes():
    assert check_blood_type_matches(7, 7) is None


def test_different_blood_fails():
    assert check_blood_type_matches(1, 7) is Violation.BLOOD_TYPE_MISMATCH


# ─── first_violation / messages ──────────────────────────────────

def test_first_violation_none_when_all_pass():
    assert first_violation(None, None, None) is None


def test_first_violation_returns_earliest_failure():
    result = first_violation(
        check_positive_quantity(0),
        check_future_date(NOW, NOW),
        check_blood_type_matches(1, 2),
    )
    assert result is Violation.QUANTITY_NOT_POSITIVE


def test_first_violation_skips_passing_checks():
    result = first_violation(
        check_positive_quantity(5),
        check_future_date(NOW, NOW),
        check_blood_type_matches(1, 2),
    )
    assert result is Violation.DATE_NOT_IN_FUTURE


def test_messages():
    assert violation_message(Violation.QUANTITY_NOT_POSITIVE) == "Quantity must be greater than zero"
    assert violation_message(Violation.DATE_NOT_IN_FUTURE, "Due date") == "Due date must be a future date"
    assert (
        violation_message(Violation.DATE_NOT_IN_FUTURE, "Expiration date")
        == "Expiration date must be a future date"
    )
    assert violation_message(Violation.BLOOD_TYPE_MISMATCH) == "Blood type does not match the request"
