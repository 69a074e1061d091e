"""
RTWPilot Case Signal Extractor

Walks one case record and emits the atomic compliance signals that feed
notifications, case flags and workload counters.

Rules are independent; a case may emit zero to many signals:
- Review dates: overdue / today / tomorrow / upcoming within the window
- RTW plan tasks: overdue, or due today or tomorrow
- RTW plan start/end dates falling today or tomorrow
- Stale communication on open cases
- Missing documents
- Initial contact not yet made on a fresh injury
- Wage data present without a PIAWE calculation
- Unread supervisor notes (only when a current user is supplied)

At most one signal is emitted per (kind, case, key) per pass.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Iterator, Optional

from ..config import DEFAULT_CONFIG, EngineConfig
from ..exceptions import CaseRecordError, MalformedDateError, RTWPilotError
from ..models import (
    Case,
    CaseStatus,
    DateClass,
    NoteAuthorRole,
    NoteType,
    Priority,
    Signal,
    SignalKind,
    SupervisorNote,
    UserContext,
)
from .diagnostics import DiagnosticChannel
from .temporal import (
    Instant,
    classify_date,
    days_overdue,
    days_since,
    days_until,
    parse_iso_date,
    parse_iso_datetime,
    to_instant,
)


# Errors that isolate a single case instead of aborting the pass
CASE_ERRORS = (RTWPilotError, KeyError, TypeError, ValueError, AttributeError)


# =============================================================================
# Severity rules
# =============================================================================

def review_overdue_severity(overdue_days: int, config: EngineConfig = DEFAULT_CONFIG) -> Priority:
    """critical above the critical threshold, high above the high threshold, else medium."""
    if overdue_days > config.review_critical_after_days:
        return Priority.CRITICAL
    if overdue_days > config.review_high_after_days:
        return Priority.HIGH
    return Priority.MEDIUM


def task_overdue_severity(overdue_days: int, config: EngineConfig = DEFAULT_CONFIG) -> Priority:
    if overdue_days > config.task_critical_after_days:
        return Priority.CRITICAL
    return Priority.HIGH


def stale_communication_severity(idle_days: int, config: EngineConfig = DEFAULT_CONFIG) -> Priority:
    if idle_days > config.stale_communication_high_days:
        return Priority.HIGH
    return Priority.MEDIUM


def supervisor_note_priority(note: SupervisorNote) -> Priority:
    """
    Priority of the notification raised by a supervisor note.

    Admin instructions are high when a response is required, else medium;
    consultant questions and replies are medium; anything else keeps the
    priority its author gave it.
    """
    if note.type == NoteType.INSTRUCTION and note.author_role == NoteAuthorRole.ADMIN:
        return Priority.HIGH if note.requires_response else Priority.MEDIUM
    if note.type == NoteType.QUESTION and note.author_role == NoteAuthorRole.CONSULTANT:
        return Priority.MEDIUM
    if note.type == NoteType.REPLY:
        return Priority.MEDIUM
    return Priority(note.priority.value)


# =============================================================================
# Extractor
# =============================================================================

@dataclass
class CaseSignalExtractor:
    """
    Extracts signals from a single case.

    Usage:
        extractor = CaseSignalExtractor(case=case, now=now, user=user)
        signals = extractor.extract()
    """
    case: Case
    now: Instant
    user: Optional[UserContext] = None
    config: EngineConfig = DEFAULT_CONFIG
    diagnostics: DiagnosticChannel = field(default_factory=DiagnosticChannel)

    def extract(self) -> list[Signal]:
        self._signals: list[Signal] = []
        self._seen: set[tuple[str, str, str]] = set()
        self._now_instant = to_instant(self.now)

        self._check_identity()
        self._review_signals()
        self._task_signals()
        self._plan_boundary_signals()
        self._communication_signals()
        self._document_signals()
        self._initial_contact_signals()
        self._piawe_signals()
        if self.user is not None:
            self._supervisor_note_signals(self.user)

        return self._signals

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _check_identity(self) -> None:
        """Every consumer names the worker and the consultant."""
        if self.case.worker is None or not self.case.consultant:
            raise CaseRecordError(
                message="Case has no worker or no assigned consultant",
                case_id=self.case.id,
            )

    def _emit(self, signal: Signal) -> None:
        if signal.identity in self._seen:
            return
        self._seen.add(signal.identity)
        self._signals.append(signal)

    def _date(self, value: object, field_path: str) -> Optional[date]:
        """Parse a date field; report and return None if malformed."""
        try:
            return parse_iso_date(value, field=field_path, case_id=self.case.id)
        except MalformedDateError as e:
            self.diagnostics.report_malformed_date(self.case.id, field_path, e)
            return None

    def _optional_date(self, value: Optional[str], field_path: str) -> Optional[date]:
        """Like _date, but an absent value is silently None."""
        if value is None or value == "":
            return None
        return self._date(value, field_path)

    # -------------------------------------------------------------------------
    # Rules
    # -------------------------------------------------------------------------

    def _review_signals(self) -> None:
        for i, raw in enumerate(self.case.review_dates):
            review = self._date(raw, f"review_dates[{i}]")
            if review is None:
                continue

            date_class = classify_date(review, self.now, self.config.upcoming_window_days)
            anchor = to_instant(review)

            if date_class == DateClass.OVERDUE:
                overdue = days_overdue(review, self.now)
                self._emit(Signal(
                    kind=SignalKind.REVIEW_OVERDUE,
                    case_id=self.case.id,
                    severity=review_overdue_severity(overdue, self.config),
                    anchor_at=anchor,
                    key=raw,
                    due_date=review,
                    days_overdue=overdue,
                ))
            elif date_class == DateClass.TODAY:
                self._emit(Signal(
                    kind=SignalKind.REVIEW_TODAY,
                    case_id=self.case.id,
                    severity=Priority.HIGH,
                    anchor_at=anchor,
                    key=raw,
                    due_date=review,
                    days_overdue=0,
                ))
            elif date_class == DateClass.TOMORROW:
                self._emit(Signal(
                    kind=SignalKind.REVIEW_TOMORROW,
                    case_id=self.case.id,
                    severity=Priority.MEDIUM,
                    anchor_at=anchor,
                    key=raw,
                    due_date=review,
                    days_overdue=0,
                ))
            elif date_class == DateClass.WITHIN:
                self._emit(Signal(
                    kind=SignalKind.REVIEW_UPCOMING,
                    case_id=self.case.id,
                    severity=Priority.LOW,
                    anchor_at=anchor,
                    key=raw,
                    due_date=review,
                    days_overdue=0,
                    payload={"days_until": days_until(review, self.now)},
                ))

    def _task_signals(self) -> None:
        for i, task in enumerate(self.case.tasks):
            if task.completed:
                continue
            due = self._date(task.due_date, f"rtw_plan.tasks[{i}].due_date")
            if due is None:
                continue

            date_class = classify_date(due, self.now, self.config.upcoming_window_days)
            if date_class == DateClass.OVERDUE:
                overdue = days_overdue(due, self.now)
                self._emit(Signal(
                    kind=SignalKind.TASK_OVERDUE,
                    case_id=self.case.id,
                    severity=task_overdue_severity(overdue, self.config),
                    anchor_at=to_instant(due),
                    key=task.id,
                    due_date=due,
                    days_overdue=overdue,
                    payload={"title": task.title},
                ))
            elif date_class in (DateClass.TODAY, DateClass.TOMORROW):
                self._emit(Signal(
                    kind=SignalKind.TASK_UPCOMING,
                    case_id=self.case.id,
                    severity=Priority.MEDIUM,
                    anchor_at=to_instant(due),
                    key=task.id,
                    due_date=due,
                    days_overdue=0,
                    payload={"title": task.title, "due": date_class.value},
                ))

    def _plan_boundary_signals(self) -> None:
        plan = self.case.rtw_plan
        if plan is None:
            return
        for boundary, raw in (("start", plan.start_date), ("end", plan.end_date)):
            when = self._optional_date(raw, f"rtw_plan.{boundary}_date")
            if when is None:
                continue
            date_class = classify_date(when, self.now, self.config.upcoming_window_days)
            if date_class not in (DateClass.TODAY, DateClass.TOMORROW):
                continue
            self._emit(Signal(
                kind=SignalKind.PLAN_BOUNDARY,
                case_id=self.case.id,
                severity=Priority.MEDIUM,
                anchor_at=to_instant(when),
                key=boundary,
                due_date=when,
                days_overdue=0,
                payload={"boundary": boundary, "due": date_class.value},
            ))

    def _communication_signals(self) -> None:
        if self.case.status != CaseStatus.OPEN:
            return

        last = self.case.last_communication
        if last is not None:
            anchor = self._date(last.date, f"communications[{len(self.case.communications) - 1}].date")
            anchor_source = "communication"
        else:
            anchor = self._date(self.case.injury_date, "injury_date")
            anchor_source = "injury"
        if anchor is None:
            return

        idle = days_since(anchor, self.now)
        if idle <= self.config.stale_communication_days:
            return
        self._emit(Signal(
            kind=SignalKind.COMMUNICATION_STALE,
            case_id=self.case.id,
            severity=stale_communication_severity(idle, self.config),
            anchor_at=to_instant(anchor),
            days_elapsed=idle,
            payload={"since": anchor_source},
        ))

    def _document_signals(self) -> None:
        if self.case.documents:
            return
        self._emit(Signal(
            kind=SignalKind.DOCUMENTS_MISSING,
            case_id=self.case.id,
            severity=Priority.MEDIUM,
            anchor_at=self._now_instant,
        ))

    def _initial_contact_signals(self) -> None:
        if self.case.communications:
            return
        injury = self._date(self.case.injury_date, "injury_date")
        if injury is None:
            return
        elapsed = days_since(injury, self.now)
        if elapsed > self.config.initial_contact_window_days:
            return
        self._emit(Signal(
            kind=SignalKind.INITIAL_CONTACT_REQUIRED,
            case_id=self.case.id,
            severity=Priority.CRITICAL,
            anchor_at=to_instant(injury),
            days_elapsed=elapsed,
        ))

    def _piawe_signals(self) -> None:
        if not self.case.wages_salary or self.case.piawe_calculation:
            return
        self._emit(Signal(
            kind=SignalKind.PIAWE_MISSING,
            case_id=self.case.id,
            severity=Priority.MEDIUM,
            anchor_at=self._now_instant,
        ))

    def _supervisor_note_signals(self, user: UserContext) -> None:
        for i, note in enumerate(self.case.supervisor_notes):
            if not note.is_visible_to(user.id, user.name):
                continue
            if note.created_at:
                try:
                    created = parse_iso_datetime(
                        note.created_at,
                        field=f"supervisor_notes[{i}].created_at",
                        case_id=self.case.id,
                    )
                except MalformedDateError as e:
                    self.diagnostics.report_malformed_date(
                        self.case.id, f"supervisor_notes[{i}].created_at", e
                    )
                    continue
            else:
                created = self._now_instant
            self._emit(Signal(
                kind=SignalKind.SUPERVISOR_NOTE,
                case_id=self.case.id,
                severity=supervisor_note_priority(note),
                anchor_at=created,
                key=note.id,
                payload={"note": note},
            ))


# =============================================================================
# Convenience Functions
# =============================================================================

def extract_signals(
    case: Case,
    now: Instant,
    user: Optional[UserContext] = None,
    config: EngineConfig = DEFAULT_CONFIG,
    diagnostics: Optional[DiagnosticChannel] = None,
) -> list[Signal]:
    """
    Extract all signals for one case.

    The supervisor-note rule runs only when `user` is given.
    """
    extractor = CaseSignalExtractor(
        case=case,
        now=now,
        user=user,
        config=config,
        diagnostics=diagnostics if diagnostics is not None else DiagnosticChannel(),
    )
    return extractor.extract()


def iter_case_signals(
    cases: Iterable[Case],
    now: Instant,
    user: Optional[UserContext] = None,
    config: EngineConfig = DEFAULT_CONFIG,
    diagnostics: Optional[DiagnosticChannel] = None,
) -> Iterator[tuple[Case, list[Signal]]]:
    """
    Yield (case, signals) for every case, isolating per-case failures.

    A case whose extraction raises is reported to the diagnostics channel
    and skipped; the remaining cases are still processed. Only the first
    record for each case id is considered.
    """
    diagnostics = diagnostics if diagnostics is not None else DiagnosticChannel()
    seen: set[str] = set()
    for case in cases:
        case_id = getattr(case, "id", None)
        if case_id is not None:
            if case_id in seen:
                continue
            seen.add(case_id)
        try:
            signals = extract_signals(case, now, user, config, diagnostics)
        except CASE_ERRORS as e:
            diagnostics.report_case_failure(getattr(case, "id", "<unknown>"), e)
            continue
        yield case, signals
