"""
RTWPilot Case Record Schemas

Pydantic models for validating case and user records read from JSON/YAML
files or handed over by a repository.

Records use the camelCase keys of the case store ("injuryDate",
"supervisorNotes", ...); snake_case field names are accepted as well.

Date fields are validated only for presence and type here. Their content is
parsed during derivation so that one malformed date skips the signals that
depend on it instead of rejecting the whole case.
"""
from __future__ import annotations

from datetime import date
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, field_validator


# =============================================================================
# Enums as Literals (for record validation)
# =============================================================================

CaseStatusValue = Literal["open", "pending", "closed"]

UserRoleValue = Literal["consultant", "admin", "support"]

NoteAuthorRoleValue = Literal["admin", "consultant"]

NoteTypeValue = Literal["instruction", "question", "reply", "general"]

NotePriorityValue = Literal["low", "medium", "high"]


class RecordModel(BaseModel):
    """Base for record schemas: accept aliases or field names, ignore extras."""

    model_config = {
        "populate_by_name": True,
        "extra": "ignore",
    }


def _iso_text(v: Any) -> Any:
    """YAML turns unquoted dates into date objects; keep them as ISO text."""
    if isinstance(v, date):
        return v.isoformat()
    return v


# =============================================================================
# People
# =============================================================================

class WorkerRecord(RecordModel):
    id: str = ""
    first_name: str = Field(..., alias="firstName")
    last_name: str = Field(..., alias="lastName")
    email: Optional[str] = None
    phone: Optional[str] = None
    position: Optional[str] = None


class EmployerRecord(RecordModel):
    id: str = ""
    name: str
    contact_person: Optional[str] = Field(None, alias="contactPerson")
    email: Optional[str] = None
    phone: Optional[str] = None


class CaseManagerRecord(RecordModel):
    id: str = ""
    name: str
    role: Optional[str] = None
    email: Optional[str] = None


class UserRecord(RecordModel):
    """One entry of the user directory."""
    id: str
    name: str
    role: UserRoleValue = "consultant"


# =============================================================================
# RTW Plan
# =============================================================================

class TaskRecord(RecordModel):
    id: str
    title: str = ""
    description: str = ""
    due_date: str = Field(..., alias="dueDate")
    completed: bool = False
    assigned_to: Optional[str] = Field(None, alias="assignedTo")

    @field_validator("due_date", mode="before")
    @classmethod
    def date_text(cls, v: Any) -> Any:
        return _iso_text(v)


class RtwPlanRecord(RecordModel):
    id: Optional[str] = None
    title: Optional[str] = None
    start_date: Optional[str] = Field(None, alias="startDate")
    end_date: Optional[str] = Field(None, alias="endDate")
    tasks: list[TaskRecord] = Field(default_factory=list)

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def date_text(cls, v: Any) -> Any:
        return _iso_text(v)


# =============================================================================
# Communications, Documents, Notes
# =============================================================================

class CommunicationRecord(RecordModel):
    id: str = ""
    date: str
    type: str = "other"
    content: str = ""
    author: Optional[str] = None

    @field_validator("date", mode="before")
    @classmethod
    def date_text(cls, v: Any) -> Any:
        return _iso_text(v)


class DocumentRecord(RecordModel):
    id: str = ""
    name: str = ""
    type: Optional[str] = None
    upload_date: Optional[str] = Field(None, alias="uploadDate")
    category: Optional[str] = None

    @field_validator("upload_date", mode="before")
    @classmethod
    def date_text(cls, v: Any) -> Any:
        return _iso_text(v)


class SupervisorNoteRecord(RecordModel):
    id: str
    content: str = ""
    author: str
    author_role: NoteAuthorRoleValue = Field(..., alias="authorRole")
    created_at: Optional[str] = Field(None, alias="createdAt")
    type: NoteTypeValue = "general"
    priority: NotePriorityValue = "medium"
    parent_id: Optional[str] = Field(None, alias="parentId")
    requires_response: bool = Field(False, alias="requiresResponse")
    read_by: list[str] = Field(default_factory=list, alias="readBy")

    @field_validator("created_at", mode="before")
    @classmethod
    def date_text(cls, v: Any) -> Any:
        return _iso_text(v)


# =============================================================================
# Case
# =============================================================================

class CaseRecord(RecordModel):
    """
    Schema for one case record.

    `wagesSalary` and `piaweCalculation` hold structured objects in the case
    store; the engine only needs to know whether each is present, so any
    non-empty value counts.
    """
    id: str = Field(..., min_length=1)
    worker: WorkerRecord
    consultant: str
    injury_date: str = Field(..., alias="injuryDate")
    status: CaseStatusValue = "open"

    employer: Optional[EmployerRecord] = None
    case_manager: Optional[CaseManagerRecord] = Field(None, alias="caseManager")
    claim_number: Optional[str] = Field(None, alias="claimNumber")

    review_dates: list[str] = Field(default_factory=list, alias="reviewDates")
    rtw_plan: Optional[RtwPlanRecord] = Field(None, alias="rtwPlan")
    communications: list[CommunicationRecord] = Field(default_factory=list)
    documents: list[DocumentRecord] = Field(default_factory=list)
    supervisor_notes: list[SupervisorNoteRecord] = Field(
        default_factory=list, alias="supervisorNotes"
    )

    wages_salary: bool = Field(False, alias="wagesSalary")
    piawe_calculation: bool = Field(False, alias="piaweCalculation")

    @field_validator("injury_date", mode="before")
    @classmethod
    def date_text(cls, v: Any) -> Any:
        return _iso_text(v)

    @field_validator("review_dates", mode="before")
    @classmethod
    def review_dates_text(cls, v: Any) -> Any:
        if v is None:
            return []
        return [_iso_text(d) for d in v]

    @field_validator("wages_salary", "piawe_calculation", mode="before")
    @classmethod
    def presence_flag(cls, v: Any) -> bool:
        """Structured objects collapse to a presence flag."""
        return bool(v)

    @field_validator("communications", "documents", "supervisor_notes", mode="before")
    @classmethod
    def null_as_empty(cls, v: Any) -> Any:
        return [] if v is None else v


class CaseFileSchema(RecordModel):
    """
    Schema for a case file: a list of cases and, optionally, the user
    directory.
    """
    cases: list[CaseRecord] = Field(default_factory=list)
    users: list[UserRecord] = Field(default_factory=list)


def validate_case_record(data: dict[str, Any]) -> CaseRecord:
    """
    Validate a single case record.

    Raises:
        pydantic.ValidationError: If validation fails
    """
    return CaseRecord.model_validate(data)


def validate_case_file(data: dict[str, Any]) -> CaseFileSchema:
    """
    Validate a whole case file.

    Raises:
        pydantic.ValidationError: If validation fails
    """
    return CaseFileSchema.model_validate(data)
