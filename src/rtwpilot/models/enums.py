"""
RTWPilot Enumerations

All enumeration types used throughout the RTWPilot engine.
Organized by domain area for clarity.

All enums inherit from (str, Enum) for JSON serialization compatibility.
"""
from __future__ import annotations

from enum import Enum


# =============================================================================
# Users and Cases
# =============================================================================

class UserRole(str, Enum):
    """Roles supplied by the identity provider."""
    CONSULTANT = "consultant"
    ADMIN = "admin"
    SUPPORT = "support"


class CaseStatus(str, Enum):
    """Lifecycle status of a case."""
    OPEN = "open"
    PENDING = "pending"
    CLOSED = "closed"


# =============================================================================
# Supervisor Notes
# =============================================================================

class NoteAuthorRole(str, Enum):
    """Role of the person who wrote a supervisor note."""
    ADMIN = "admin"
    CONSULTANT = "consultant"


class NoteType(str, Enum):
    """Kind of supervisor note."""
    INSTRUCTION = "instruction"
    QUESTION = "question"
    REPLY = "reply"
    GENERAL = "general"


class NotePriority(str, Enum):
    """Priority stated on a supervisor note by its author."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# =============================================================================
# Priority
# =============================================================================

class Priority(str, Enum):
    """
    Shared severity vocabulary.

    Used as notification `priority` and as case flag `severity`; both use
    the same rank scale (see engine/priority.py).
    """
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {
    Priority.CRITICAL: 4,
    Priority.HIGH: 3,
    Priority.MEDIUM: 2,
    Priority.LOW: 1,
}


# =============================================================================
# Temporal Classification
# =============================================================================

class DateClass(str, Enum):
    """Position of a calendar date relative to the reference date."""
    OVERDUE = "overdue"      # Strictly before today
    TODAY = "today"
    TOMORROW = "tomorrow"
    WITHIN = "within"        # 2..N days ahead
    FUTURE = "future"        # Beyond the window


# =============================================================================
# Signals
# =============================================================================

class SignalKind(str, Enum):
    """Atomic compliance events derived from one case."""
    REVIEW_OVERDUE = "review_overdue"
    REVIEW_TODAY = "review_today"
    REVIEW_TOMORROW = "review_tomorrow"
    REVIEW_UPCOMING = "review_upcoming"
    TASK_OVERDUE = "task_overdue"
    TASK_UPCOMING = "task_upcoming"
    PLAN_BOUNDARY = "plan_boundary"
    COMMUNICATION_STALE = "communication_stale"
    DOCUMENTS_MISSING = "documents_missing"
    INITIAL_CONTACT_REQUIRED = "initial_contact_required"
    PIAWE_MISSING = "piawe_missing"
    SUPERVISOR_NOTE = "supervisor_note"


# =============================================================================
# Notifications
# =============================================================================

class NotificationCategory(str, Enum):
    """Grouping used by the notification centre."""
    CASE_MANAGEMENT = "case_management"
    COMPLIANCE = "compliance"
    REMINDER = "reminder"
    SUPERVISOR = "supervisor"
    SYSTEM = "system"


class NotificationFilter(str, Enum):
    """Views offered over a notification list."""
    ALL = "all"
    UNREAD = "unread"
    HIGH_PRIORITY = "high_priority"
    SUPERVISOR = "supervisor"


# =============================================================================
# Case Flags
# =============================================================================

class FlagType(str, Enum):
    """Supervisor-facing flag types, one per non-personal signal kind."""
    OVERDUE_REVIEW = "overdue_review"
    REVIEW_DUE = "review_due"
    URGENT_ACTION = "urgent_action"
    TASK_DUE = "task_due"
    PLAN_MILESTONE = "plan_milestone"
    COMMUNICATION_GAP = "communication_gap"
    MISSING_DOCS = "missing_docs"
    COMPLIANCE_ISSUE = "compliance_issue"
    QUALITY_CONCERN = "quality_concern"


# =============================================================================
# Workload
# =============================================================================

class WorkloadBand(str, Enum):
    """Load label shown against a consultant."""
    NORMAL = "normal"
    HIGH = "high"
    OVERLOADED = "overloaded"


class UrgentTaskType(str, Enum):
    """Items in the supervisor's urgent work queue."""
    OVERDUE_REVIEW = "overdue_review"
    URGENT_RTW = "urgent_rtw"
    COMPLIANCE_ISSUE = "compliance_issue"


# =============================================================================
# Diagnostics
# =============================================================================

class DiagnosticKind(str, Enum):
    """Problems reported during a derivation pass."""
    MALFORMED_DATE = "malformed_date"
    CASE_FAILED = "case_failed"
