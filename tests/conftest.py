"""
Pytest configuration and fixtures for RTWPilot tests.

Provides helper factories and common fixtures matching actual model
definitions. Every test runs against the fixed reference instant NOW, so
results never depend on the wall clock.
"""
import pytest
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from rtwpilot.models import (
    Case,
    CaseStatus,
    Communication,
    Document,
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


# =============================================================================
# Reference instant
# =============================================================================

NOW = datetime(2024, 6, 15, 9, 30, tzinfo=timezone.utc)
TODAY = NOW.date()


def day(offset: int) -> str:
    """ISO date string `offset` days from TODAY (negative = past)."""
    return (TODAY + timedelta(days=offset)).isoformat()


# =============================================================================
# Factory Helpers
# =============================================================================

def make_task(
    id: str = "task-1",
    due_offset: int = 0,
    title: str = "Obtain medical certificate",
    completed: bool = False,
    due_date: Optional[str] = None,
) -> Task:
    """Create a Task due `due_offset` days from TODAY."""
    return Task(
        id=id,
        title=title,
        due_date=due_date if due_date is not None else day(due_offset),
        completed=completed,
    )


def make_communication(id: str = "comm-1", offset: int = -1, date: Optional[str] = None) -> Communication:
    return Communication(id=id, date=date if date is not None else day(offset), type="phone")


def make_document(id: str = "doc-1") -> Document:
    return Document(id=id, name=f"{id}.pdf", upload_date=day(-10), category="medical")


def make_note(
    id: str = "note-1",
    author: str = "Sarah Mitchell",
    author_role: NoteAuthorRole = NoteAuthorRole.ADMIN,
    type: NoteType = NoteType.INSTRUCTION,
    priority: NotePriority = NotePriority.MEDIUM,
    requires_response: bool = False,
    read_by: tuple = (),
    created_at: Optional[str] = "2024-06-14T08:00:00Z",
) -> SupervisorNote:
    """Create a SupervisorNote (admin instruction by default)."""
    return SupervisorNote(
        id=id,
        author=author,
        author_role=author_role,
        type=type,
        priority=priority,
        requires_response=requires_response,
        read_by=frozenset(read_by),
        created_at=created_at,
        content="Please follow up",
    )


def make_user(
    id: str = "consultant-1",
    name: str = "James Carter",
    role: UserRole = UserRole.CONSULTANT,
) -> UserContext:
    return UserContext(id=id, name=name, role=role)


def make_case(
    id: str = "CASE-1",
    consultant: str = "consultant-1",
    status: CaseStatus = CaseStatus.OPEN,
    injury_offset: int = -60,
    injury_date: Optional[str] = None,
    review_dates: Optional[list[str]] = None,
    tasks: Optional[list[Task]] = None,
    plan_start: Optional[str] = None,
    plan_end: Optional[str] = None,
    communications: Optional[list[Communication]] = None,
    documents: Optional[list[Document]] = None,
    supervisor_notes: Optional[list[SupervisorNote]] = None,
    wages_salary: bool = False,
    piawe_calculation: bool = False,
    first_name: str = "Daniel",
    last_name: str = "Reyes",
) -> Case:
    """
    Create a Case that is quiet by default.

    A default case has a recent communication and a document, so it emits
    no signals unless a test adds something.
    """
    has_plan = tasks is not None or plan_start is not None or plan_end is not None
    return Case(
        id=id,
        worker=Worker(id=f"w-{id}", first_name=first_name, last_name=last_name),
        consultant=consultant,
        injury_date=injury_date if injury_date is not None else day(injury_offset),
        status=status,
        review_dates=review_dates if review_dates is not None else [],
        rtw_plan=(
            RtwPlan(start_date=plan_start, end_date=plan_end, tasks=tasks or [])
            if has_plan else None
        ),
        communications=(
            communications if communications is not None else [make_communication()]
        ),
        documents=documents if documents is not None else [make_document()],
        supervisor_notes=supervisor_notes if supervisor_notes is not None else [],
        wages_salary=wages_salary,
        piawe_calculation=piawe_calculation,
    )


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def consultant() -> UserContext:
    return make_user()


@pytest.fixture
def admin() -> UserContext:
    return make_user(id="admin-1", name="Sarah Mitchell", role=UserRole.ADMIN)


@pytest.fixture
def directory(consultant, admin) -> list[UserContext]:
    return [consultant, admin]


@pytest.fixture
def quiet_case() -> Case:
    return make_case()
