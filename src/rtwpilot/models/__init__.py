"""
RTWPilot Models

Domain models for the derivation engine.

Input (read-only):
- Case, Worker, RtwPlan, Task, Communication, Document, SupervisorNote
- UserContext, UserDirectory

Derived (ephemeral):
- Signal
- Notification, NotificationOverlay, NotificationBadges
- CaseFlag
- ConsultantWorkload, ConsultantPerformance, UrgentTask
"""
from __future__ import annotations

from .enums import (
    CaseStatus,
    DateClass,
    DiagnosticKind,
    FlagType,
    NoteAuthorRole,
    NotePriority,
    NoteType,
    NotificationCategory,
    NotificationFilter,
    Priority,
    SignalKind,
    UrgentTaskType,
    UserRole,
    WorkloadBand,
)
from .case import (
    Case,
    CaseManager,
    Communication,
    Document,
    Employer,
    RtwPlan,
    SupervisorNote,
    Task,
    Worker,
)
from .identity import UNKNOWN_CONSULTANT, UserContext, UserDirectory
from .signal import Signal
from .notification import (
    Notification,
    NotificationBadges,
    NotificationOverlay,
    filter_notifications,
)
from .flag import CaseFlag
from .workload import ConsultantPerformance, ConsultantWorkload, UrgentTask


__all__ = [
    # Enums
    "CaseStatus",
    "DateClass",
    "DiagnosticKind",
    "FlagType",
    "NoteAuthorRole",
    "NotePriority",
    "NoteType",
    "NotificationCategory",
    "NotificationFilter",
    "Priority",
    "SignalKind",
    "UrgentTaskType",
    "UserRole",
    "WorkloadBand",
    # Case
    "Case",
    "CaseManager",
    "Communication",
    "Document",
    "Employer",
    "RtwPlan",
    "SupervisorNote",
    "Task",
    "Worker",
    # Identity
    "UNKNOWN_CONSULTANT",
    "UserContext",
    "UserDirectory",
    # Derived
    "Signal",
    "Notification",
    "NotificationBadges",
    "NotificationOverlay",
    "filter_notifications",
    "CaseFlag",
    "ConsultantPerformance",
    "ConsultantWorkload",
    "UrgentTask",
]
