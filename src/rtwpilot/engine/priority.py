"""
RTWPilot Priority & Sort Engine

One total order shared by notifications and case flags.

Order:
1. Priority rank descending (critical=4, high=3, medium=2, low=1)
2. created_at descending (most recent first)
3. id ascending (final tie-breaker, keeps output stable)

Notifications rank by `priority`, flags by `severity`; both use the Priority
enum, so the same key function serves both through a severity accessor.
"""
from __future__ import annotations

from datetime import datetime
from typing import Callable, Iterable, Protocol, TypeVar, Union

from ..models import CaseFlag, Notification, Priority

from .temporal import to_instant


PRIORITY_RANK: dict[Priority, int] = {p: p.rank for p in Priority}


class Rankable(Protocol):
    id: str
    created_at: datetime


T = TypeVar("T", bound=Rankable)


def priority_rank(priority: Union[Priority, str]) -> int:
    """Rank of a priority/severity value; accepts the enum or its string."""
    return PRIORITY_RANK[Priority(priority)]


def priority_sort_key(item: Rankable, severity_of: Callable[[Rankable], Priority]) -> tuple:
    """
    Generate a sort key for stable priority ordering.

    Returns:
        Tuple for sorting
    """
    # Negate rank for descending order
    rank = -priority_rank(severity_of(item))

    # Negate timestamp for descending order
    created = -to_instant(item.created_at).timestamp()

    return (rank, created, item.id)


def sort_by_priority(items: Iterable[T], severity_of: Callable[[T], Priority]) -> list[T]:
    """Sort items by severity, then recency, then id."""
    return sorted(items, key=lambda item: priority_sort_key(item, severity_of))


def sort_notifications(notifications: Iterable[Notification]) -> list[Notification]:
    return sort_by_priority(notifications, lambda n: n.priority)


def sort_flags(flags: Iterable[CaseFlag]) -> list[CaseFlag]:
    return sort_by_priority(flags, lambda f: f.severity)


def at_least(priority: Priority, minimum: Priority) -> bool:
    """True if priority ranks at or above minimum."""
    return priority.rank >= minimum.rank
