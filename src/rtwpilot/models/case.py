"""
RTWPilot Case Models

Read-only view of the case records supplied by the Case Repository.

Key components:
- Case: One injured worker's return-to-work case
- RtwPlan / Task: The return-to-work plan and its task list
- SupervisorNote: Threaded notes between supervisors and consultants

Date fields are kept as the raw ISO-8601 strings the repository supplied.
They are parsed by engine/temporal.py during derivation, so a malformed
field is detected (and reported) per field rather than rejecting the whole
record at load time.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from .enums import CaseStatus, NoteAuthorRole, NotePriority, NoteType


# =============================================================================
# People
# =============================================================================

@dataclass
class Worker:
    """The injured worker."""
    id: str
    first_name: str
    last_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    position: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass
class Employer:
    """The worker's employer."""
    id: str
    name: str
    contact_person: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


@dataclass
class CaseManager:
    """Case manager recorded on the case (denormalised from the directory)."""
    id: str
    name: str
    role: Optional[str] = None
    email: Optional[str] = None


# =============================================================================
# RTW Plan
# =============================================================================

@dataclass
class Task:
    """A task on the RTW plan."""
    id: str
    title: str
    due_date: str
    completed: bool = False
    description: str = ""
    assigned_to: Optional[str] = None


@dataclass
class RtwPlan:
    """
    Return-to-work plan.

    Tasks are an unordered set; extraction iterates them in list order so
    that output stays deterministic.
    """
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    tasks: list[Task] = field(default_factory=list)
    id: Optional[str] = None
    title: Optional[str] = None


# =============================================================================
# Communications, Documents, Notes
# =============================================================================

@dataclass
class Communication:
    """A logged communication, ordered by occurrence within the case."""
    id: str
    date: str
    type: str = "other"
    content: str = ""
    author: Optional[str] = None


@dataclass
class Document:
    """A document attached to the case."""
    id: str
    name: str
    type: Optional[str] = None
    upload_date: Optional[str] = None
    category: Optional[str] = None


@dataclass
class SupervisorNote:
    """
    A note in the supervisor/consultant thread of a case.

    Attributes:
        id: Unique note identifier
        author: Display name of the author
        author_role: Whether an admin or a consultant wrote it
        type: instruction | question | reply | general
        priority: Priority stated by the author
        requires_response: Author expects an answer
        read_by: User ids that have read the note
        created_at: ISO-8601 timestamp
    """
    id: str
    author: str
    author_role: NoteAuthorRole
    type: NoteType
    priority: NotePriority = NotePriority.MEDIUM
    requires_response: bool = False
    read_by: frozenset[str] = field(default_factory=frozenset)
    created_at: Optional[str] = None
    content: str = ""
    parent_id: Optional[str] = None

    def is_visible_to(self, user_id: str, user_name: str) -> bool:
        """A note is pending for a user unless they wrote it or already read it."""
        return self.author != user_name and user_id not in self.read_by


# =============================================================================
# Case
# =============================================================================

@dataclass
class Case:
    """
    A return-to-work case as supplied by the Case Repository.

    The engine never mutates a Case.
    """
    id: str
    worker: Worker
    consultant: str
    injury_date: str
    status: CaseStatus = CaseStatus.OPEN
    employer: Optional[Employer] = None
    case_manager: Optional[CaseManager] = None
    claim_number: Optional[str] = None
    review_dates: list[str] = field(default_factory=list)
    rtw_plan: Optional[RtwPlan] = None
    communications: list[Communication] = field(default_factory=list)
    documents: list[Document] = field(default_factory=list)
    supervisor_notes: list[SupervisorNote] = field(default_factory=list)
    wages_salary: bool = False
    piawe_calculation: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def worker_name(self) -> str:
        return self.worker.full_name

    @property
    def tasks(self) -> list[Task]:
        if self.rtw_plan is None:
            return []
        return self.rtw_plan.tasks

    @property
    def last_communication(self) -> Optional[Communication]:
        if not self.communications:
            return None
        return self.communications[-1]
