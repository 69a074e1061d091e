"""
RTWPilot Workload Models

Key components:
- ConsultantWorkload: Per-consultant case counters (admin dashboard)
- ConsultantPerformance: Per-consultant quality view (quality control)
- UrgentTask: Item in the supervisor's urgent work queue
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional

from .enums import Priority, UrgentTaskType


@dataclass
class ConsultantWorkload:
    """
    Case counters for one consultant.

    Built incrementally by the workload aggregator; one instance per distinct
    consultant id observed in the case set.
    """
    consultant_id: str
    consultant_name: Optional[str] = None
    total_cases: int = 0
    open_cases: int = 0
    pending_cases: int = 0
    overdue_tasks: int = 0
    urgent_cases: int = 0
    quality_score: int = 85

    @property
    def active_cases(self) -> int:
        """Open plus pending cases."""
        return self.open_cases + self.pending_cases

    def to_dict(self) -> dict[str, Any]:
        return {
            "consultant_id": self.consultant_id,
            "consultant_name": self.consultant_name,
            "total_cases": self.total_cases,
            "open_cases": self.open_cases,
            "pending_cases": self.pending_cases,
            "active_cases": self.active_cases,
            "overdue_tasks": self.overdue_tasks,
            "urgent_cases": self.urgent_cases,
            "quality_score": self.quality_score,
        }


@dataclass
class ConsultantPerformance:
    """Quality-control summary for one consultant."""
    consultant_id: str
    consultant_name: str
    total_cases: int = 0
    overdue_actions: int = 0
    flagged_cases: list[str] = field(default_factory=list)

    @property
    def open_issues(self) -> int:
        return len(self.flagged_cases)

    def to_dict(self) -> dict[str, Any]:
        return {
            "consultant_id": self.consultant_id,
            "consultant_name": self.consultant_name,
            "total_cases": self.total_cases,
            "overdue_actions": self.overdue_actions,
            "open_issues": self.open_issues,
            "flagged_cases": list(self.flagged_cases),
        }


@dataclass(frozen=True)
class UrgentTask:
    """An entry in the supervisor's urgent task queue."""
    id: str
    case_id: str
    worker_name: str
    consultant_id: str
    task_type: UrgentTaskType
    priority: Priority
    due_date: date
    days_overdue: int
    description: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "case_id": self.case_id,
            "worker_name": self.worker_name,
            "consultant_id": self.consultant_id,
            "task_type": self.task_type.value,
            "priority": self.priority.value,
            "due_date": self.due_date.isoformat(),
            "days_overdue": self.days_overdue,
            "description": self.description,
        }
