"""Demo case records for running the service without a case file.

Dates are expressed as offsets from a reference day so the demo always
shows overdue, due-today and upcoming items.
"""

from datetime import date, timedelta

from rtwpilot.models import Case, UserContext, UserRole
from rtwpilot.records import cases_from_dicts

DEMO_USERS = [
    UserContext(id="admin-1", name="Sarah Mitchell", role=UserRole.ADMIN),
    UserContext(id="consultant-1", name="James Carter", role=UserRole.CONSULTANT),
    UserContext(id="consultant-2", name="Priya Natarajan", role=UserRole.CONSULTANT),
]


def _day(today: date, offset: int) -> str:
    return (today + timedelta(days=offset)).isoformat()


def demo_case_records(today: date) -> list[dict]:
    """Raw camelCase case records, as the case store would return them."""
    return [
        # ============== OVERDUE REVIEW, STALE CONTACT ==============
        {
            "id": "CASE-1001",
            "claimNumber": "WC-2024-1001",
            "worker": {"id": "w-1", "firstName": "Daniel", "lastName": "Reyes"},
            "employer": {"id": "e-1", "name": "Harbour Logistics"},
            "consultant": "consultant-1",
            "status": "open",
            "injuryDate": _day(today, -60),
            "reviewDates": [_day(today, -9), _day(today, 14)],
            "rtwPlan": {
                "id": "plan-1001",
                "title": "Graduated return to warehouse duties",
                "startDate": _day(today, -30),
                "endDate": _day(today, 1),
                "tasks": [
                    {"id": "t-1", "title": "Obtain updated medical certificate",
                     "dueDate": _day(today, -6), "completed": False},
                    {"id": "t-2", "title": "Worksite assessment",
                     "dueDate": _day(today, -2), "completed": False},
                    {"id": "t-3", "title": "Confirm suitable duties",
                     "dueDate": _day(today, -20), "completed": True},
                ],
            },
            "communications": [
                {"id": "c-1", "date": _day(today, -35), "type": "phone",
                 "content": "Check-in with worker", "author": "James Carter"},
            ],
            "documents": [
                {"id": "d-1", "name": "Certificate of capacity.pdf", "type": "application/pdf",
                 "uploadDate": _day(today, -58), "category": "medical"},
            ],
            "supervisorNotes": [
                {"id": "note-1", "author": "Sarah Mitchell", "authorRole": "admin",
                 "type": "instruction", "priority": "high", "requiresResponse": True,
                 "createdAt": f"{_day(today, -1)}T09:30:00Z",
                 "content": "Escalate the overdue review with the treating doctor.",
                 "readBy": []},
            ],
            "wagesSalary": {"grossWeekly": 1450.0},
        },
        # ============== NEW INJURY, NO CONTACT YET ==============
        {
            "id": "CASE-1002",
            "claimNumber": "WC-2024-1002",
            "worker": {"id": "w-2", "firstName": "Mei", "lastName": "Tanaka"},
            "consultant": "consultant-2",
            "status": "pending",
            "injuryDate": _day(today, -2),
            "reviewDates": [_day(today, 0)],
            "communications": [],
            "documents": [],
            "supervisorNotes": [
                {"id": "note-2", "author": "Priya Natarajan", "authorRole": "consultant",
                 "type": "question", "priority": "medium",
                 "createdAt": f"{_day(today, 0)}T08:00:00Z",
                 "content": "Should we request a pre-injury duties statement?",
                 "readBy": []},
            ],
        },
        # ============== WELL-MANAGED CASE ==============
        {
            "id": "CASE-1003",
            "claimNumber": "WC-2024-1003",
            "worker": {"id": "w-3", "firstName": "Tom", "lastName": "Okafor"},
            "consultant": "consultant-1",
            "status": "open",
            "injuryDate": _day(today, -40),
            "reviewDates": [_day(today, 5)],
            "rtwPlan": {
                "startDate": _day(today, -10),
                "endDate": _day(today, 30),
                "tasks": [
                    {"id": "t-4", "title": "Physio progress report",
                     "dueDate": _day(today, 1), "completed": False},
                ],
            },
            "communications": [
                {"id": "c-2", "date": _day(today, -3), "type": "email",
                 "content": "Weekly update", "author": "James Carter"},
            ],
            "documents": [
                {"id": "d-2", "name": "RTW plan.pdf", "uploadDate": _day(today, -10)},
            ],
            "wagesSalary": {"grossWeekly": 1200.0},
            "piaweCalculation": {"amount": 1180.0},
        },
        # ============== CLOSED ==============
        {
            "id": "CASE-1004",
            "worker": {"id": "w-4", "firstName": "Lucy", "lastName": "Brennan"},
            "consultant": "consultant-3",
            "status": "closed",
            "injuryDate": _day(today, -200),
            "communications": [
                {"id": "c-3", "date": _day(today, -90), "type": "letter",
                 "content": "Closure letter"},
            ],
            "documents": [{"id": "d-3", "name": "Closure.pdf"}],
        },
    ]


def get_demo_cases(today: date) -> list[Case]:
    return cases_from_dicts(demo_case_records(today))


class DemoCaseRepository:
    """Case repository that rebuilds the demo cases relative to today."""

    def list_cases(self) -> list[Case]:
        return get_demo_cases(date.today())

    def list_users(self) -> list[UserContext]:
        return list(DEMO_USERS)
