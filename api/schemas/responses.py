"""Response schemas for the API."""

from pydantic import BaseModel
from typing import Optional


class NotificationOut(BaseModel):
    """A derived notification with session read state."""
    id: str
    kind: str
    title: str
    message: str
    case_id: Optional[str] = None
    worker_name: Optional[str] = None
    priority: str  # low|medium|high|critical
    created_at: str
    due_date: Optional[str] = None
    read: bool
    action_required: bool
    category: str  # case_management|compliance|reminder|supervisor|system
    supervisor_note_id: Optional[str] = None
    supervisor_note_type: Optional[str] = None


class BadgesOut(BaseModel):
    """Notification bell counts."""
    unread: int
    critical: int
    supervisor_unread: int


class DiagnosticOut(BaseModel):
    """A problem found while deriving (malformed date or failed case)."""
    kind: str
    case_id: str
    field: Optional[str] = None
    value: Optional[str] = None
    message: str


class NotificationListResponse(BaseModel):
    """Notification centre payload."""
    user_id: str
    filter: str
    notifications: list[NotificationOut]
    badges: BadgesOut
    diagnostics: list[DiagnosticOut]


class OverlayUpdateResponse(BaseModel):
    """Result of a read/dismiss action."""
    session_id: str
    read_ids: list[str]
    dismissed_ids: list[str]


class FlagOut(BaseModel):
    """A supervisor-facing case flag."""
    id: str
    case_id: str
    worker_name: str
    consultant_id: str
    consultant_name: str
    flag_type: str
    severity: str
    description: str
    created_at: str
    due_date: Optional[str] = None


class WorkloadOut(BaseModel):
    """Per-consultant workload counters."""
    consultant_id: str
    consultant_name: Optional[str] = None
    total_cases: int
    open_cases: int
    pending_cases: int
    active_cases: int
    overdue_tasks: int
    urgent_cases: int
    quality_score: int
    band: str  # normal|high|overloaded
    needs_attention: bool


class PerformanceOut(BaseModel):
    """Per-consultant quality-control summary."""
    consultant_id: str
    consultant_name: str
    total_cases: int
    overdue_actions: int
    open_issues: int
    flagged_cases: list[str]


class UrgentTaskOut(BaseModel):
    """One entry of the supervisor's urgent task queue."""
    id: str
    case_id: str
    worker_name: str
    consultant_id: str
    task_type: str  # overdue_review|urgent_rtw|compliance_issue
    priority: str
    due_date: Optional[str] = None
    days_overdue: int
    description: str
