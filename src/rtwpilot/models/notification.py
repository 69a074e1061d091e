"""
RTWPilot Notification Models

Key components:
- Notification: A personalised, derived alert for one user
- NotificationOverlay: Session-local read/dismissed state keyed by id
- NotificationBadges: Counts shown on the notification bell

Notifications are recomputed on every derivation pass. Their ids are stable
across passes, so the overlay can be re-applied to fresh output without a
read or dismissed item reappearing.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Any, Iterable, Optional

from .enums import (
    NoteType,
    NotificationCategory,
    NotificationFilter,
    Priority,
    SignalKind,
)


# =============================================================================
# Notification
# =============================================================================

@dataclass(frozen=True)
class Notification:
    """
    A derived notification.

    Attributes:
        id: Deterministic id derived from the source signal
        kind: Source signal kind
        title: Short heading
        message: Personalised sentence
        priority: low | medium | high | critical
        created_at: Pinned to the source signal's anchor instant
        category: Notification centre grouping
        action_required: Whether the user is expected to act
        read: Overlay state (False when freshly derived)
    """
    id: str
    kind: SignalKind
    title: str
    message: str
    priority: Priority
    created_at: datetime
    category: NotificationCategory
    action_required: bool
    case_id: Optional[str] = None
    worker_name: Optional[str] = None
    due_date: Optional[date] = None
    read: bool = False
    supervisor_note_id: Optional[str] = None
    supervisor_note_type: Optional[NoteType] = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "id": self.id,
            "kind": self.kind.value,
            "title": self.title,
            "message": self.message,
            "case_id": self.case_id,
            "worker_name": self.worker_name,
            "priority": self.priority.value,
            "created_at": self.created_at.isoformat(),
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "read": self.read,
            "action_required": self.action_required,
            "category": self.category.value,
            "supervisor_note_id": self.supervisor_note_id,
            "supervisor_note_type": (
                self.supervisor_note_type.value if self.supervisor_note_type else None
            ),
        }


# =============================================================================
# Overlay
# =============================================================================

@dataclass(frozen=True)
class NotificationOverlay:
    """
    Session-local read/dismissed state.

    Immutable: every update returns a new overlay. Updates are set unions
    (or differences for `unmark_read`), so they commute and can be applied
    in any order after a derivation pass completes. Ids that are not in the
    current output are kept, so a fact that disappears and later returns
    keeps its state.
    """
    read_ids: frozenset[str] = field(default_factory=frozenset)
    dismissed_ids: frozenset[str] = field(default_factory=frozenset)

    def mark_read(self, notification_id: str) -> NotificationOverlay:
        return replace(self, read_ids=self.read_ids | {notification_id})

    def mark_all_read(self, notification_ids: Iterable[str]) -> NotificationOverlay:
        return replace(self, read_ids=self.read_ids | frozenset(notification_ids))

    def unmark_read(self, notification_id: str) -> NotificationOverlay:
        return replace(self, read_ids=self.read_ids - {notification_id})

    def dismiss(self, notification_id: str) -> NotificationOverlay:
        return replace(self, dismissed_ids=self.dismissed_ids | {notification_id})

    def merge(self, other: NotificationOverlay) -> NotificationOverlay:
        """Combine two overlays (e.g. updates made while a pass was in flight)."""
        return NotificationOverlay(
            read_ids=self.read_ids | other.read_ids,
            dismissed_ids=self.dismissed_ids | other.dismissed_ids,
        )

    def apply(self, notifications: Iterable[Notification]) -> list[Notification]:
        """Drop dismissed notifications and set `read` from the overlay."""
        result: list[Notification] = []
        for n in notifications:
            if n.id in self.dismissed_ids:
                continue
            is_read = n.id in self.read_ids
            result.append(n if n.read == is_read else replace(n, read=is_read))
        return result


# =============================================================================
# Badges and filters
# =============================================================================

@dataclass(frozen=True)
class NotificationBadges:
    """
    Bell counts.

    `unread` and `critical` are independent predicates: an unread
    due-tomorrow reminder counts towards `unread` but never `critical`, and a
    read critical notification still counts towards `critical`.
    """
    unread: int = 0
    critical: int = 0
    supervisor_unread: int = 0

    @classmethod
    def from_notifications(cls, notifications: Iterable[Notification]) -> NotificationBadges:
        unread = critical = supervisor_unread = 0
        for n in notifications:
            if not n.read:
                unread += 1
                if n.category == NotificationCategory.SUPERVISOR:
                    supervisor_unread += 1
            if n.priority == Priority.CRITICAL:
                critical += 1
        return cls(unread=unread, critical=critical, supervisor_unread=supervisor_unread)

    def to_dict(self) -> dict[str, int]:
        return {
            "unread": self.unread,
            "critical": self.critical,
            "supervisor_unread": self.supervisor_unread,
        }


def filter_notifications(
    notifications: Iterable[Notification],
    view: NotificationFilter = NotificationFilter.ALL,
) -> list[Notification]:
    """Apply one of the notification centre views."""
    if view == NotificationFilter.UNREAD:
        return [n for n in notifications if not n.read]
    if view == NotificationFilter.HIGH_PRIORITY:
        return [n for n in notifications if n.priority in (Priority.CRITICAL, Priority.HIGH)]
    if view == NotificationFilter.SUPERVISOR:
        return [n for n in notifications if n.category == NotificationCategory.SUPERVISOR]
    return list(notifications)
