"""
RTWPilot Case Flag Model

Supervisor-facing compliance concerns about a consultant's case. Flags carry
no per-user read state.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional

from .enums import FlagType, Priority


@dataclass(frozen=True)
class CaseFlag:
    """
    A compliance flag raised on a case.

    Attributes:
        id: Deterministic id derived from the source signal
        case_id: Flagged case
        flag_type: Flag category
        severity: Same rank scale as notification priority
        description: Impersonal description for supervisors
        consultant_id: Assigned consultant id from the case
        consultant_name: "<name> (<role>)" from the directory, or "Unknown"
    """
    id: str
    case_id: str
    flag_type: FlagType
    severity: Priority
    description: str
    created_at: datetime
    worker_name: str
    consultant_id: str
    consultant_name: str
    due_date: Optional[date] = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "id": self.id,
            "case_id": self.case_id,
            "flag_type": self.flag_type.value,
            "severity": self.severity.value,
            "description": self.description,
            "created_at": self.created_at.isoformat(),
            "worker_name": self.worker_name,
            "consultant_id": self.consultant_id,
            "consultant_name": self.consultant_name,
            "due_date": self.due_date.isoformat() if self.due_date else None,
        }
