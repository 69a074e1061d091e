"""
RTWPilot Case Record Loader

Loads and validates case records from YAML or JSON files.

Converts Pydantic record models to the read-only domain models in
rtwpilot.models.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, Union

import yaml
from pydantic import ValidationError

from ..exceptions import CaseRecordError
from ..models import (
    Case,
    CaseManager,
    CaseStatus,
    Communication,
    Document,
    Employer,
    NoteAuthorRole,
    NotePriority,
    NoteType,
    RtwPlan,
    SupervisorNote,
    Task,
    UserContext,
    UserRole,
    Worker,
)
from .schema import (
    CaseFileSchema,
    CaseRecord,
    RtwPlanRecord,
    SupervisorNoteRecord,
    UserRecord,
    validate_case_file,
    validate_case_record,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Schema to Model Converters
# =============================================================================

def _convert_plan(schema: RtwPlanRecord) -> RtwPlan:
    return RtwPlan(
        id=schema.id,
        title=schema.title,
        start_date=schema.start_date,
        end_date=schema.end_date,
        tasks=[
            Task(
                id=t.id,
                title=t.title,
                description=t.description,
                due_date=t.due_date,
                completed=t.completed,
                assigned_to=t.assigned_to,
            )
            for t in schema.tasks
        ],
    )


def _convert_note(schema: SupervisorNoteRecord) -> SupervisorNote:
    return SupervisorNote(
        id=schema.id,
        author=schema.author,
        author_role=NoteAuthorRole(schema.author_role),
        type=NoteType(schema.type),
        priority=NotePriority(schema.priority),
        requires_response=schema.requires_response,
        read_by=frozenset(schema.read_by),
        created_at=schema.created_at,
        content=schema.content,
        parent_id=schema.parent_id,
    )


def case_from_record(schema: CaseRecord) -> Case:
    """Convert a validated CaseRecord to a Case."""
    return Case(
        id=schema.id,
        worker=Worker(
            id=schema.worker.id,
            first_name=schema.worker.first_name,
            last_name=schema.worker.last_name,
            email=schema.worker.email,
            phone=schema.worker.phone,
            position=schema.worker.position,
        ),
        consultant=schema.consultant,
        injury_date=schema.injury_date,
        status=CaseStatus(schema.status),
        employer=(
            Employer(
                id=schema.employer.id,
                name=schema.employer.name,
                contact_person=schema.employer.contact_person,
                email=schema.employer.email,
                phone=schema.employer.phone,
            )
            if schema.employer else None
        ),
        case_manager=(
            CaseManager(
                id=schema.case_manager.id,
                name=schema.case_manager.name,
                role=schema.case_manager.role,
                email=schema.case_manager.email,
            )
            if schema.case_manager else None
        ),
        claim_number=schema.claim_number,
        review_dates=list(schema.review_dates),
        rtw_plan=_convert_plan(schema.rtw_plan) if schema.rtw_plan else None,
        communications=[
            Communication(id=c.id, date=c.date, type=c.type, content=c.content, author=c.author)
            for c in schema.communications
        ],
        documents=[
            Document(
                id=d.id,
                name=d.name,
                type=d.type,
                upload_date=d.upload_date,
                category=d.category,
            )
            for d in schema.documents
        ],
        supervisor_notes=[_convert_note(n) for n in schema.supervisor_notes],
        wages_salary=schema.wages_salary,
        piawe_calculation=schema.piawe_calculation,
    )


def user_from_record(schema: UserRecord) -> UserContext:
    """Convert a validated UserRecord to a UserContext."""
    return UserContext(id=schema.id, name=schema.name, role=UserRole(schema.role))


# =============================================================================
# Loading
# =============================================================================

def case_from_dict(data: dict[str, Any]) -> Case:
    """
    Validate and convert one raw case record.

    Raises:
        CaseRecordError: If the record violates the schema
    """
    try:
        schema = validate_case_record(data)
    except ValidationError as e:
        case_id = data.get("id") if isinstance(data, dict) else None
        raise CaseRecordError(
            message=f"Case record validation failed: {e.error_count()} errors",
            details={"errors": e.errors(include_url=False)},
            case_id=str(case_id) if case_id else None,
        )
    return case_from_record(schema)


def cases_from_dicts(records: Iterable[dict[str, Any]]) -> list[Case]:
    """Validate and convert a list of raw case records, in order."""
    return [case_from_dict(r) for r in records]


def _load_file(path: Path) -> Any:
    """Load data from YAML or JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        if path.suffix.lower() in {".yaml", ".yml"}:
            return yaml.safe_load(f)
        elif path.suffix.lower() == ".json":
            return json.load(f)
        else:
            # Try YAML first, then JSON
            content = f.read()
            try:
                return yaml.safe_load(content)
            except yaml.YAMLError:
                return json.loads(content)


def load_case_file(path: Union[str, Path]) -> tuple[list[Case], list[UserContext]]:
    """
    Load cases and the user directory from a file.

    The file is either a mapping with `cases` and optional `users` lists,
    or a bare list of case records.

    Returns:
        (cases, users)

    Raises:
        OSError, ValueError, yaml.YAMLError: If the file cannot be read
        CaseRecordError: If any record violates the schema
    """
    path = Path(path)
    data = _load_file(path)
    if data is None:
        data = {}
    if isinstance(data, list):
        data = {"cases": data}
    if not isinstance(data, dict):
        raise CaseRecordError(
            message="Case file must be a mapping or a list of cases",
            details={"path": str(path)},
        )

    try:
        schema: CaseFileSchema = validate_case_file(data)
    except ValidationError as e:
        raise CaseRecordError(
            message=f"Case file validation failed: {e.error_count()} errors",
            details={"errors": e.errors(include_url=False), "path": str(path)},
        )

    cases = [case_from_record(c) for c in schema.cases]
    users = [user_from_record(u) for u in schema.users]
    logger.info("Loaded %d cases and %d users from %s", len(cases), len(users), path)
    return cases, users
