"""
RTWPilot Case Flag Generator

Supervisor-facing compliance flags for quality review.

Flags come from the same signals as notifications, minus the supervisor-note
rule (there is no current user), with impersonal wording and the assigned
consultant's display name resolved from the user directory. A consultant
missing from the directory is shown as "Unknown"; the flag is kept.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Union

from ..config import DEFAULT_CONFIG, EngineConfig
from ..models import (
    Case,
    CaseFlag,
    FlagType,
    Priority,
    Signal,
    SignalKind,
    UserContext,
    UserDirectory,
)
from .diagnostics import DiagnosticChannel
from .priority import at_least, sort_flags
from .signal_extractor import iter_case_signals
from .temporal import Instant

logger = logging.getLogger(__name__)

Directory = Union[UserDirectory, Iterable[UserContext]]


# =============================================================================
# Flag types and descriptions
# =============================================================================

FLAG_TYPES: dict[SignalKind, FlagType] = {
    SignalKind.REVIEW_OVERDUE: FlagType.OVERDUE_REVIEW,
    SignalKind.REVIEW_TODAY: FlagType.REVIEW_DUE,
    SignalKind.REVIEW_TOMORROW: FlagType.REVIEW_DUE,
    SignalKind.REVIEW_UPCOMING: FlagType.REVIEW_DUE,
    SignalKind.TASK_OVERDUE: FlagType.URGENT_ACTION,
    SignalKind.TASK_UPCOMING: FlagType.TASK_DUE,
    SignalKind.PLAN_BOUNDARY: FlagType.PLAN_MILESTONE,
    SignalKind.COMMUNICATION_STALE: FlagType.COMMUNICATION_GAP,
    SignalKind.DOCUMENTS_MISSING: FlagType.MISSING_DOCS,
    SignalKind.INITIAL_CONTACT_REQUIRED: FlagType.COMPLIANCE_ISSUE,
    SignalKind.PIAWE_MISSING: FlagType.QUALITY_CONCERN,
}

# Personal signals never become flags
PERSONAL_SIGNALS = frozenset({SignalKind.SUPERVISOR_NOTE})


def _days(n: int) -> str:
    return f"{n} day" if n == 1 else f"{n} days"


def _describe(signal: Signal) -> str:
    kind = signal.kind
    if kind == SignalKind.REVIEW_OVERDUE:
        return f"RTW review overdue by {_days(signal.days_overdue or 0)}"
    if kind == SignalKind.REVIEW_TODAY:
        return "RTW review due today"
    if kind == SignalKind.REVIEW_TOMORROW:
        return "RTW review due tomorrow"
    if kind == SignalKind.REVIEW_UPCOMING:
        return f"RTW review due in {_days(signal.payload.get('days_until', 0))}"
    if kind == SignalKind.TASK_OVERDUE:
        return f"Task overdue: {signal.payload.get('title', '')} ({_days(signal.days_overdue or 0)})"
    if kind == SignalKind.TASK_UPCOMING:
        return f"Task due {signal.payload.get('due', 'today')}: {signal.payload.get('title', '')}"
    if kind == SignalKind.PLAN_BOUNDARY:
        verb = "starts" if signal.payload.get("boundary") == "start" else "ends"
        return f"RTW plan {verb} {signal.payload.get('due', 'today')}"
    if kind == SignalKind.COMMUNICATION_STALE:
        return f"No communication recorded for {_days(signal.days_elapsed or 0)}"
    if kind == SignalKind.DOCUMENTS_MISSING:
        return "No supporting documents uploaded"
    if kind == SignalKind.INITIAL_CONTACT_REQUIRED:
        return f"No initial contact recorded ({_days(signal.days_elapsed or 0)} since injury)"
    if kind == SignalKind.PIAWE_MISSING:
        return "PIAWE calculation missing despite wage information available"
    raise ValueError(f"No flag description for signal kind {kind.value}")


def as_directory(directory: Optional[Directory]) -> UserDirectory:
    """Accept a UserDirectory or any iterable of users."""
    if directory is None:
        return UserDirectory()
    if isinstance(directory, UserDirectory):
        return directory
    return UserDirectory(directory)


# =============================================================================
# Generator
# =============================================================================

@dataclass
class CaseFlagGenerator:
    """
    Derives case flags across all cases.

    Usage:
        generator = CaseFlagGenerator()
        flags = generator.generate(cases, directory, now)
    """
    config: EngineConfig = DEFAULT_CONFIG

    def generate(
        self,
        cases: Iterable[Case],
        directory: Optional[Directory],
        now: Instant,
        diagnostics: Optional[DiagnosticChannel] = None,
    ) -> list[CaseFlag]:
        directory = as_directory(directory)
        diagnostics = diagnostics if diagnostics is not None else DiagnosticChannel()
        by_id: dict[str, CaseFlag] = {}

        for case, signals in iter_case_signals(cases, now, None, self.config, diagnostics):
            consultant_name = directory.display_name_for(case.consultant)
            for signal in signals:
                if signal.kind in PERSONAL_SIGNALS:
                    continue
                flag = CaseFlag(
                    id=f"flag-{signal.slug}",
                    case_id=case.id,
                    flag_type=FLAG_TYPES[signal.kind],
                    severity=signal.severity,
                    description=_describe(signal),
                    created_at=signal.anchor_at,
                    worker_name=case.worker_name,
                    consultant_id=case.consultant,
                    consultant_name=consultant_name,
                    due_date=signal.due_date,
                )
                by_id.setdefault(flag.id, flag)

        logger.debug("Derived %d case flags", len(by_id))
        return sort_flags(by_id.values())


def generate_case_flags(
    cases: Iterable[Case],
    directory: Optional[Directory],
    now: Instant,
    config: EngineConfig = DEFAULT_CONFIG,
    diagnostics: Optional[DiagnosticChannel] = None,
) -> list[CaseFlag]:
    """
    Derive sorted case flags.

    Convenience function that creates a temporary generator.
    """
    return CaseFlagGenerator(config=config).generate(cases, directory, now, diagnostics)


def filter_flags(
    flags: Iterable[CaseFlag],
    consultant_id: Optional[str] = None,
    min_severity: Optional[Priority] = None,
    flag_type: Optional[FlagType] = None,
) -> list[CaseFlag]:
    """Narrow a flag list for the quality-control view; order is preserved."""
    predicates: list[Callable[[CaseFlag], bool]] = []
    if consultant_id is not None:
        predicates.append(lambda f: f.consultant_id == consultant_id)
    if min_severity is not None:
        predicates.append(lambda f: at_least(f.severity, min_severity))
    if flag_type is not None:
        predicates.append(lambda f: f.flag_type == flag_type)
    return [f for f in flags if all(p(f) for p in predicates)]
