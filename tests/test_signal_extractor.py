"""
Tests for the case signal extractor.

Tests cover:
- Review severity boundaries
- Task, plan, communication, document, initial contact and PIAWE rules
- Supervisor note visibility
- Malformed dates reported as diagnostics
- Per-case isolation
"""
import pytest

from rtwpilot.engine import DiagnosticChannel, extract_signals, iter_case_signals
from rtwpilot.models import (
    CaseStatus,
    DiagnosticKind,
    NotePriority,
    NoteType,
    Priority,
    SignalKind,
)

from tests.conftest import (
    NOW,
    day,
    make_case,
    make_communication,
    make_note,
    make_task,
    make_user,
)


def kinds(signals):
    return [s.kind for s in signals]


class TestQuietCases:
    """A case with nothing to report emits nothing."""

    def test_quiet_open_case(self, quiet_case):
        assert extract_signals(quiet_case, NOW) == []

    def test_quiet_closed_case(self):
        case = make_case(status=CaseStatus.CLOSED)
        assert extract_signals(case, NOW) == []


class TestReviewSignals:
    """Tests for review date rules."""

    @pytest.mark.parametrize(
        "overdue,expected",
        [
            (8, Priority.CRITICAL),
            (7, Priority.HIGH),
            (4, Priority.HIGH),
            (3, Priority.MEDIUM),
            (1, Priority.MEDIUM),
        ],
    )
    def test_overdue_severity_boundaries(self, overdue, expected):
        case = make_case(review_dates=[day(-overdue)])
        signals = extract_signals(case, NOW)

        assert kinds(signals) == [SignalKind.REVIEW_OVERDUE]
        assert signals[0].severity == expected
        assert signals[0].days_overdue == overdue

    def test_today_tomorrow_upcoming(self):
        case = make_case(review_dates=[day(0), day(1), day(5), day(8)])
        signals = extract_signals(case, NOW)

        assert kinds(signals) == [
            SignalKind.REVIEW_TODAY,
            SignalKind.REVIEW_TOMORROW,
            SignalKind.REVIEW_UPCOMING,
        ]
        assert [s.severity for s in signals] == [Priority.HIGH, Priority.MEDIUM, Priority.LOW]
        assert signals[2].payload["days_until"] == 5

    def test_duplicate_review_dates_emit_once(self):
        case = make_case(review_dates=[day(-2), day(-2)])
        assert len(extract_signals(case, NOW)) == 1

    def test_review_keyed_by_date(self):
        case = make_case(id="CASE-7", review_dates=[day(-2), day(-4)])
        signals = extract_signals(case, NOW)
        assert [s.key for s in signals] == [day(-2), day(-4)]
        assert signals[0].slug == f"review-overdue:CASE-7:{day(-2)}"


class TestTaskSignals:
    """Tests for RTW plan task rules."""

    def test_overdue_task_severity(self):
        case = make_case(tasks=[
            make_task(id="t-1", due_offset=-6),
            make_task(id="t-2", due_offset=-5),
        ])
        signals = extract_signals(case, NOW)

        assert kinds(signals) == [SignalKind.TASK_OVERDUE, SignalKind.TASK_OVERDUE]
        assert signals[0].severity == Priority.CRITICAL
        assert signals[1].severity == Priority.HIGH

    def test_same_age_tasks_are_distinct(self):
        case = make_case(tasks=[
            make_task(id="t-1", due_offset=-2),
            make_task(id="t-2", due_offset=-2),
        ])
        signals = extract_signals(case, NOW)
        assert len({s.identity for s in signals}) == 2

    def test_completed_task_ignored(self):
        case = make_case(tasks=[make_task(due_offset=-10, completed=True)])
        assert extract_signals(case, NOW) == []

    def test_task_due_today_and_tomorrow(self):
        case = make_case(tasks=[
            make_task(id="t-1", due_offset=0),
            make_task(id="t-2", due_offset=1),
            make_task(id="t-3", due_offset=2),
        ])
        signals = extract_signals(case, NOW)

        assert kinds(signals) == [SignalKind.TASK_UPCOMING, SignalKind.TASK_UPCOMING]
        assert [s.payload["due"] for s in signals] == ["today", "tomorrow"]


class TestPlanBoundarySignals:
    """Tests for RTW plan start/end dates."""

    def test_start_today_end_tomorrow(self):
        case = make_case(plan_start=day(0), plan_end=day(1))
        signals = extract_signals(case, NOW)

        assert kinds(signals) == [SignalKind.PLAN_BOUNDARY, SignalKind.PLAN_BOUNDARY]
        assert [s.key for s in signals] == ["start", "end"]

    def test_far_boundaries_ignored(self):
        case = make_case(plan_start=day(-30), plan_end=day(30))
        assert extract_signals(case, NOW) == []

    def test_absent_boundary_is_not_malformed(self):
        diagnostics = DiagnosticChannel()
        case = make_case(plan_start=None, plan_end=day(1))
        signals = extract_signals(case, NOW, diagnostics=diagnostics)

        assert kinds(signals) == [SignalKind.PLAN_BOUNDARY]
        assert len(diagnostics) == 0


class TestCaseLevelSignals:
    """Tests for communication, document, initial contact and PIAWE rules."""

    def test_stale_communication_medium(self):
        case = make_case(communications=[make_communication(offset=-15)])
        signals = extract_signals(case, NOW)

        assert kinds(signals) == [SignalKind.COMMUNICATION_STALE]
        assert signals[0].severity == Priority.MEDIUM
        assert signals[0].days_elapsed == 15

    def test_stale_communication_high(self):
        case = make_case(communications=[make_communication(offset=-31)])
        signals = extract_signals(case, NOW)
        assert signals[0].severity == Priority.HIGH

    def test_fourteen_days_is_not_stale(self):
        case = make_case(communications=[make_communication(offset=-14)])
        assert extract_signals(case, NOW) == []

    def test_last_communication_is_last_in_list(self):
        case = make_case(communications=[
            make_communication(id="c-1", offset=-40),
            make_communication(id="c-2", offset=-2),
        ])
        assert extract_signals(case, NOW) == []

    def test_stale_only_on_open_cases(self):
        case = make_case(status=CaseStatus.PENDING, communications=[make_communication(offset=-40)])
        assert extract_signals(case, NOW) == []

    def test_no_communications_measured_from_injury(self):
        case = make_case(injury_offset=-20, communications=[])
        signals = extract_signals(case, NOW)

        assert kinds(signals) == [SignalKind.COMMUNICATION_STALE]
        assert signals[0].payload["since"] == "injury"

    def test_documents_missing(self):
        case = make_case(documents=[])
        signals = extract_signals(case, NOW)

        assert kinds(signals) == [SignalKind.DOCUMENTS_MISSING]
        assert signals[0].severity == Priority.MEDIUM

    def test_fresh_injury_requires_initial_contact(self):
        case = make_case(injury_offset=-2, communications=[])
        signals = [s for s in extract_signals(case, NOW)
                   if s.kind == SignalKind.INITIAL_CONTACT_REQUIRED]

        assert len(signals) == 1
        assert signals[0].severity == Priority.CRITICAL
        assert signals[0].days_elapsed == 2

    def test_initial_contact_not_required_after_contact(self):
        case = make_case(injury_offset=-2)
        assert extract_signals(case, NOW) == []

    def test_older_injury_no_initial_contact_signal(self):
        case = make_case(injury_offset=-4, communications=[])
        assert SignalKind.INITIAL_CONTACT_REQUIRED not in kinds(extract_signals(case, NOW))

    def test_piawe_missing(self):
        case = make_case(wages_salary=True)
        assert kinds(extract_signals(case, NOW)) == [SignalKind.PIAWE_MISSING]

    def test_piawe_present(self):
        case = make_case(wages_salary=True, piawe_calculation=True)
        assert extract_signals(case, NOW) == []


class TestSupervisorNoteSignals:
    """Tests for supervisor note visibility."""

    def test_no_user_no_note_signals(self):
        case = make_case(supervisor_notes=[make_note()])
        assert extract_signals(case, NOW) == []

    def test_unread_note_from_other_author(self, consultant):
        case = make_case(supervisor_notes=[make_note(requires_response=True)])
        signals = extract_signals(case, NOW, user=consultant)

        assert kinds(signals) == [SignalKind.SUPERVISOR_NOTE]
        assert signals[0].severity == Priority.HIGH
        assert signals[0].key == "note-1"

    def test_read_note_hidden(self, consultant):
        case = make_case(supervisor_notes=[make_note(read_by=(consultant.id,))])
        assert extract_signals(case, NOW, user=consultant) == []

    def test_own_note_hidden(self):
        author = make_user(id="admin-1", name="Sarah Mitchell")
        case = make_case(supervisor_notes=[make_note(author="Sarah Mitchell")])
        assert extract_signals(case, NOW, user=author) == []

    def test_general_note_keeps_author_priority(self, consultant):
        case = make_case(supervisor_notes=[
            make_note(type=NoteType.GENERAL, priority=NotePriority.LOW),
        ])
        signals = extract_signals(case, NOW, user=consultant)
        assert signals[0].severity == Priority.LOW

    def test_note_anchor_is_created_at(self, consultant):
        case = make_case(supervisor_notes=[make_note(created_at="2024-06-14T08:00:00Z")])
        signal = extract_signals(case, NOW, user=consultant)[0]
        assert signal.anchor_at.isoformat() == "2024-06-14T08:00:00+00:00"


class TestMalformedDates:
    """Malformed fields skip only their own signals."""

    def test_malformed_review_skipped_and_reported(self):
        diagnostics = DiagnosticChannel()
        case = make_case(id="CASE-5", review_dates=["31/05/2024", day(-2)])
        signals = extract_signals(case, NOW, diagnostics=diagnostics)

        assert kinds(signals) == [SignalKind.REVIEW_OVERDUE]
        assert len(diagnostics) == 1
        report = diagnostics.reports[0]
        assert report.kind == DiagnosticKind.MALFORMED_DATE
        assert report.case_id == "CASE-5"
        assert report.field == "review_dates[0]"
        assert report.value == "31/05/2024"

    def test_malformed_injury_date_reported_once(self):
        diagnostics = DiagnosticChannel()
        # Both the stale-communication and initial-contact rules read it
        case = make_case(injury_date="garbage", communications=[], documents=[])
        signals = extract_signals(case, NOW, diagnostics=diagnostics)

        assert kinds(signals) == [SignalKind.DOCUMENTS_MISSING]
        assert diagnostics.malformed_fields(case.id) == ["injury_date"]

    def test_malformed_date_never_means_now(self):
        case = make_case(tasks=[make_task(due_date="tomorrow-ish")])
        assert extract_signals(case, NOW) == []


class TestCaseIsolation:
    """One broken case does not abort the pass."""

    def test_broken_case_skipped(self):
        broken = make_case(id="CASE-BAD", review_dates=[day(-2)])
        broken.worker = None
        broken.review_dates = None
        good = make_case(id="CASE-OK", review_dates=[day(-2)])
        diagnostics = DiagnosticChannel()

        results = list(iter_case_signals([broken, good], NOW, diagnostics=diagnostics))

        assert [case.id for case, _ in results] == ["CASE-OK"]
        assert len(diagnostics) == 1
        assert diagnostics.reports[0].kind == DiagnosticKind.CASE_FAILED
        assert diagnostics.reports[0].case_id == "CASE-BAD"
