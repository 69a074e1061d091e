"""
RTWPilot Notification Synthesizer

Converts the signals of every case visible to a user into personalised
Notification records.

Key features:
- Kind-specific titles and messages naming the worker and the day count
- Supervisor-note titles differentiated by note subtype
- Deterministic ids so read/dismissed state survives re-derivation
- created_at pinned to the signal anchor, never the wall clock
- Output sorted by the shared priority order
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from ..config import DEFAULT_CONFIG, EngineConfig
from ..models import (
    Case,
    NoteAuthorRole,
    NoteType,
    Notification,
    NotificationCategory,
    Signal,
    SignalKind,
    SupervisorNote,
    UserContext,
)
from .diagnostics import DiagnosticChannel
from .priority import sort_notifications
from .signal_extractor import iter_case_signals
from .temporal import Instant

logger = logging.getLogger(__name__)


# =============================================================================
# Categories
# =============================================================================

SIGNAL_CATEGORY: dict[SignalKind, NotificationCategory] = {
    SignalKind.REVIEW_OVERDUE: NotificationCategory.CASE_MANAGEMENT,
    SignalKind.REVIEW_TODAY: NotificationCategory.REMINDER,
    SignalKind.REVIEW_TOMORROW: NotificationCategory.REMINDER,
    SignalKind.REVIEW_UPCOMING: NotificationCategory.REMINDER,
    SignalKind.TASK_OVERDUE: NotificationCategory.CASE_MANAGEMENT,
    SignalKind.TASK_UPCOMING: NotificationCategory.REMINDER,
    SignalKind.PLAN_BOUNDARY: NotificationCategory.REMINDER,
    SignalKind.COMMUNICATION_STALE: NotificationCategory.CASE_MANAGEMENT,
    SignalKind.DOCUMENTS_MISSING: NotificationCategory.COMPLIANCE,
    SignalKind.INITIAL_CONTACT_REQUIRED: NotificationCategory.COMPLIANCE,
    SignalKind.PIAWE_MISSING: NotificationCategory.COMPLIANCE,
    SignalKind.SUPERVISOR_NOTE: NotificationCategory.SUPERVISOR,
}


# =============================================================================
# Text templates
# =============================================================================

def _days(n: int) -> str:
    return f"{n} day" if n == 1 else f"{n} days"


# Each template returns (title, message, action_required)
Template = Callable[[Signal, str], tuple[str, str, bool]]


def _review_overdue(signal: Signal, worker: str) -> tuple[str, str, bool]:
    return (
        "Review Overdue",
        f"RTW review for {worker} is {_days(signal.days_overdue or 0)} overdue",
        True,
    )


def _review_today(signal: Signal, worker: str) -> tuple[str, str, bool]:
    return ("Review Due Today", f"RTW review for {worker} is scheduled for today", True)


def _review_tomorrow(signal: Signal, worker: str) -> tuple[str, str, bool]:
    return ("Review Due Tomorrow", f"RTW review for {worker} is scheduled for tomorrow", False)


def _review_upcoming(signal: Signal, worker: str) -> tuple[str, str, bool]:
    return (
        "Upcoming Review",
        f"RTW review for {worker} is due in {_days(signal.payload.get('days_until', 0))}",
        False,
    )


def _task_overdue(signal: Signal, worker: str) -> tuple[str, str, bool]:
    title = signal.payload.get("title", "Task")
    return (
        "Task Overdue",
        f'"{title}" for {worker} is {_days(signal.days_overdue or 0)} overdue',
        True,
    )


def _task_upcoming(signal: Signal, worker: str) -> tuple[str, str, bool]:
    title = signal.payload.get("title", "Task")
    due = signal.payload.get("due", "today")
    return (
        f"Task Due {due.capitalize()}",
        f'"{title}" for {worker} is due {due}',
        due == "today",
    )


def _plan_boundary(signal: Signal, worker: str) -> tuple[str, str, bool]:
    due = signal.payload.get("due", "today")
    if signal.payload.get("boundary") == "start":
        return ("RTW Plan Starting", f"RTW plan for {worker} starts {due}", due == "today")
    return ("RTW Plan Ending", f"RTW plan for {worker} ends {due}", due == "today")


def _communication_stale(signal: Signal, worker: str) -> tuple[str, str, bool]:
    return (
        "Communication Required",
        f"No communication with {worker} for {_days(signal.days_elapsed or 0)}",
        True,
    )


def _documents_missing(signal: Signal, worker: str) -> tuple[str, str, bool]:
    return ("Documents Missing", f"No supporting documents uploaded for {worker}", True)


def _initial_contact(signal: Signal, worker: str) -> tuple[str, str, bool]:
    return (
        "Initial Contact Required",
        f"Initial contact with {worker} required within 48 hours of injury",
        True,
    )


def _piawe_missing(signal: Signal, worker: str) -> tuple[str, str, bool]:
    return (
        "PIAWE Calculation Required",
        f"PIAWE calculation needed for {worker} - wage information available",
        True,
    )


def _supervisor_note(signal: Signal, worker: str) -> tuple[str, str, bool]:
    note: SupervisorNote = signal.payload["note"]
    action_required = note.requires_response or note.type == NoteType.QUESTION

    if note.type == NoteType.INSTRUCTION and note.author_role == NoteAuthorRole.ADMIN:
        return (
            "New Instruction",
            f"Supervisor {note.author} provided instructions for {worker}",
            action_required,
        )
    if note.type == NoteType.QUESTION and note.author_role == NoteAuthorRole.CONSULTANT:
        return (
            "Question from Case Manager",
            f"{note.author} asked a question about {worker}",
            action_required,
        )
    if note.type == NoteType.REPLY:
        return (
            "Reply to Your Note",
            f"{note.author} replied to your note about {worker}",
            action_required,
        )
    return (
        "New Supervisor Note",
        f"{note.author} added a note about {worker}",
        action_required,
    )


TEMPLATES: dict[SignalKind, Template] = {
    SignalKind.REVIEW_OVERDUE: _review_overdue,
    SignalKind.REVIEW_TODAY: _review_today,
    SignalKind.REVIEW_TOMORROW: _review_tomorrow,
    SignalKind.REVIEW_UPCOMING: _review_upcoming,
    SignalKind.TASK_OVERDUE: _task_overdue,
    SignalKind.TASK_UPCOMING: _task_upcoming,
    SignalKind.PLAN_BOUNDARY: _plan_boundary,
    SignalKind.COMMUNICATION_STALE: _communication_stale,
    SignalKind.DOCUMENTS_MISSING: _documents_missing,
    SignalKind.INITIAL_CONTACT_REQUIRED: _initial_contact,
    SignalKind.PIAWE_MISSING: _piawe_missing,
    SignalKind.SUPERVISOR_NOTE: _supervisor_note,
}


# =============================================================================
# Synthesizer
# =============================================================================

def notification_from_signal(signal: Signal, case: Case) -> Notification:
    """Build the notification for one signal of `case`."""
    worker = case.worker_name
    title, message, action_required = TEMPLATES[signal.kind](signal, worker)

    note: Optional[SupervisorNote] = signal.payload.get("note")
    return Notification(
        id=signal.slug,
        kind=signal.kind,
        title=title,
        message=message,
        priority=signal.severity,
        created_at=signal.anchor_at,
        category=SIGNAL_CATEGORY[signal.kind],
        action_required=action_required,
        case_id=case.id,
        worker_name=worker,
        due_date=signal.due_date,
        supervisor_note_id=note.id if note is not None else None,
        supervisor_note_type=note.type if note is not None else None,
    )


@dataclass
class NotificationSynthesizer:
    """
    Derives the notification list for one user.

    Usage:
        synthesizer = NotificationSynthesizer()
        notifications = synthesizer.synthesize(cases, user, now)
    """
    config: EngineConfig = DEFAULT_CONFIG

    def synthesize(
        self,
        cases: Iterable[Case],
        user: Optional[UserContext],
        now: Instant,
        diagnostics: Optional[DiagnosticChannel] = None,
    ) -> list[Notification]:
        """
        Derive notifications for every case visible to `user`.

        Without a user the supervisor-note rule is skipped and the remaining
        rules still apply.
        """
        diagnostics = diagnostics if diagnostics is not None else DiagnosticChannel()
        by_id: dict[str, Notification] = {}

        for case, signals in iter_case_signals(cases, now, user, self.config, diagnostics):
            for signal in signals:
                notification = notification_from_signal(signal, case)
                # Duplicate case records must not duplicate a surfaced fact
                by_id.setdefault(notification.id, notification)

        logger.debug(
            "Derived %d notifications for user %s",
            len(by_id),
            user.id if user else "<none>",
        )
        return sort_notifications(by_id.values())


def synthesize_notifications(
    cases: Iterable[Case],
    user: Optional[UserContext],
    now: Instant,
    config: EngineConfig = DEFAULT_CONFIG,
    diagnostics: Optional[DiagnosticChannel] = None,
) -> list[Notification]:
    """
    Derive sorted notifications.

    Convenience function that creates a temporary synthesizer.
    """
    return NotificationSynthesizer(config=config).synthesize(cases, user, now, diagnostics)
