"""
RTWPilot Temporal Predicates

Classifies dates relative to a reference instant ("now") and computes
elapsed day/hour counts.

All comparisons operate on calendar dates. A date-time string contributes
the calendar date it was written with; no timezone conversion is applied,
so "2024-06-15T23:30:00-05:00" is the 15th whatever the server zone.

Parsing never falls back to "now": anything that is not a valid ISO-8601
date or date-time raises MalformedDateError.
"""
from __future__ import annotations

from datetime import date, datetime, time, timezone
from typing import Optional, Union

from ..exceptions import MalformedDateError
from ..models import DateClass

Instant = Union[date, datetime]


# =============================================================================
# Parsing
# =============================================================================

def _parse_datetime_text(text: str) -> datetime:
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def parse_iso_date(
    value: object,
    field: Optional[str] = None,
    case_id: Optional[str] = None,
) -> date:
    """
    Parse an ISO-8601 date or date-time into a calendar date.

    Args:
        value: "YYYY-MM-DD", an ISO date-time string, or a date/datetime
        field: Field path for error reporting
        case_id: Owning case for error reporting

    Raises:
        MalformedDateError: If the value cannot be parsed
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise MalformedDateError(
            message=f"Missing or non-string date value: {value!r}",
            details={"field": field, "value": repr(value)},
            case_id=case_id,
        )

    text = value.strip()
    try:
        if len(text) == 10:
            return date.fromisoformat(text)
        return _parse_datetime_text(text).date()
    except ValueError as e:
        raise MalformedDateError(
            message=f"Invalid ISO-8601 date {text!r}: {e}",
            details={"field": field, "value": text},
            case_id=case_id,
        )


def parse_iso_datetime(
    value: object,
    field: Optional[str] = None,
    case_id: Optional[str] = None,
) -> datetime:
    """
    Parse an ISO-8601 date-time into an aware datetime.

    Naive values are taken as UTC; date-only values are midnight UTC.

    Raises:
        MalformedDateError: If the value cannot be parsed
    """
    if isinstance(value, (date, datetime)):
        return to_instant(value)
    if not isinstance(value, str) or not value.strip():
        raise MalformedDateError(
            message=f"Missing or non-string date-time value: {value!r}",
            details={"field": field, "value": repr(value)},
            case_id=case_id,
        )

    text = value.strip()
    try:
        if len(text) == 10:
            return to_instant(date.fromisoformat(text))
        return to_instant(_parse_datetime_text(text))
    except ValueError as e:
        raise MalformedDateError(
            message=f"Invalid ISO-8601 date-time {text!r}: {e}",
            details={"field": field, "value": text},
            case_id=case_id,
        )


# =============================================================================
# Reference instant
# =============================================================================

def reference_date(now: Instant) -> date:
    """Calendar date of the reference instant."""
    if isinstance(now, datetime):
        return now.date()
    return now


def to_instant(value: Instant) -> datetime:
    """Aware datetime for a date (midnight UTC) or datetime (naive = UTC)."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
    return datetime.combine(value, time.min, tzinfo=timezone.utc)


# =============================================================================
# Day counts
# =============================================================================

def days_until(target: date, now: Instant) -> int:
    """Signed whole days from the reference date to target (negative if past)."""
    return (target - reference_date(now)).days


def days_since(target: date, now: Instant) -> int:
    """Signed whole days from target to the reference date."""
    return (reference_date(now) - target).days


def days_overdue(target: date, now: Instant) -> int:
    """Whole days past target; 0 when target is today or later."""
    return max(0, days_since(target, now))


def hours_until(target: Instant, now: Instant) -> int:
    """Signed whole hours from the reference instant to target."""
    delta = to_instant(target) - to_instant(now)
    return int(delta.total_seconds() / 3600)


# =============================================================================
# Classification
# =============================================================================

def classify_date(target: date, now: Instant, within_days: int = 7) -> DateClass:
    """
    Classify target relative to the reference date.

    Exactly one of:
        OVERDUE   target is before today
        TODAY     target is today
        TOMORROW  target is tomorrow
        WITHIN    2 <= days until target <= within_days
        FUTURE    anything later
    """
    delta = days_until(target, now)

    if delta < 0:
        return DateClass.OVERDUE
    elif delta == 0:
        return DateClass.TODAY
    elif delta == 1:
        return DateClass.TOMORROW
    elif delta <= within_days:
        return DateClass.WITHIN
    else:
        return DateClass.FUTURE


def is_overdue(target: date, now: Instant) -> bool:
    return days_until(target, now) < 0


def is_due_today(target: date, now: Instant) -> bool:
    return days_until(target, now) == 0


def is_due_tomorrow(target: date, now: Instant) -> bool:
    return days_until(target, now) == 1


def is_due_today_or_tomorrow(target: date, now: Instant) -> bool:
    return 0 <= days_until(target, now) <= 1


def is_upcoming_within(target: date, now: Instant, days: int) -> bool:
    """Due today or within the next `days` days."""
    return 0 <= days_until(target, now) <= days
