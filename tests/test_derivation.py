"""
Tests for the derivation facade.

Tests cover:
- derive_all running the three derivations over one snapshot
- Diagnostics reported once across derivations
- Per-case isolation
- Overlay application
- Snapshot fingerprints
"""
from rtwpilot.canon import canonical_json, content_hash, snapshot_fingerprint
from rtwpilot.engine import (
    derive_all,
    derive_case_flags,
    derive_notifications,
    derive_workloads,
)
from rtwpilot.models import DiagnosticKind, NotificationOverlay, Priority

from tests.conftest import NOW, day, make_case, make_note, make_task


def snapshot():
    return [
        make_case(id="CASE-1", review_dates=[day(-9), "not-a-date"]),
        make_case(id="CASE-2", consultant="consultant-2", tasks=[make_task(due_offset=-2)]),
        make_case(id="CASE-3", supervisor_notes=[make_note()], documents=[]),
    ]


class TestDeriveAll:
    """Tests for the combined pass."""

    def test_outputs(self, consultant, directory):
        result = derive_all(snapshot(), consultant, directory, NOW)

        assert result.reference_instant == NOW
        assert len(result.notifications) == 4
        assert len(result.flags) == 3
        assert [w.consultant_id for w in result.workloads] == ["consultant-1", "consultant-2"]
        assert result.badges.critical == 1

    def test_malformed_date_reported_once(self, consultant, directory):
        result = derive_all(snapshot(), consultant, directory, NOW)

        assert len(result.diagnostics) == 1
        report = result.diagnostics[0]
        assert report.kind == DiagnosticKind.MALFORMED_DATE
        assert report.case_id == "CASE-1"
        assert report.field == "review_dates[1]"

    def test_broken_case_isolated(self, consultant, directory):
        cases = snapshot()
        broken = make_case(id="CASE-X", review_dates=[day(-9)])
        broken.worker = None
        cases.insert(1, broken)

        result = derive_all(cases, consultant, directory, NOW)

        assert "CASE-X" not in {n.case_id for n in result.notifications}
        assert "CASE-X" not in {f.case_id for f in result.flags}
        assert sum(w.total_cases for w in result.workloads) == 3
        failures = [d for d in result.diagnostics if d.kind == DiagnosticKind.CASE_FAILED]
        assert [d.case_id for d in failures] == ["CASE-X"]

    def test_overlay_applied(self, consultant, directory):
        first = derive_all(snapshot(), consultant, directory, NOW)
        critical = next(n for n in first.notifications if n.priority == Priority.CRITICAL)
        overlay = NotificationOverlay().dismiss(critical.id)

        second = derive_all(snapshot(), consultant, directory, NOW, overlay=overlay)

        assert critical.id not in {n.id for n in second.notifications}
        # Flags have no read state
        assert len(second.flags) == len(first.flags)

    def test_idempotent(self, consultant, directory):
        first = derive_all(snapshot(), consultant, directory, NOW)
        second = derive_all(snapshot(), consultant, directory, NOW)
        assert canonical_json(first.to_dict()) == canonical_json(second.to_dict())

    def test_to_dict(self, consultant, directory):
        data = derive_all(snapshot(), consultant, directory, NOW).to_dict()

        assert data["reference_instant"] == "2024-06-15T09:30:00+00:00"
        assert data["badges"]["supervisor_unread"] == 1
        assert set(data) == {
            "reference_instant",
            "snapshot_hash",
            "notifications",
            "flags",
            "workloads",
            "diagnostics",
            "badges",
        }


class TestSingleDerivations:
    """Tests for the individual facade functions."""

    def test_derive_notifications_with_overlay(self, consultant):
        notifications = derive_notifications(snapshot(), consultant, NOW)
        overlay = NotificationOverlay().mark_all_read(n.id for n in notifications)

        read = derive_notifications(snapshot(), consultant, NOW, overlay=overlay)

        assert all(n.read for n in read)

    def test_derive_case_flags(self, directory):
        flags = derive_case_flags(snapshot(), directory, NOW)
        assert flags[0].severity == Priority.CRITICAL

    def test_derive_workloads(self):
        workloads = derive_workloads(snapshot(), NOW)
        assert [w.total_cases for w in workloads] == [2, 1]


class TestSnapshotFingerprint:
    """Tests for snapshot_fingerprint."""

    def test_order_independent(self):
        cases = snapshot()
        assert snapshot_fingerprint(cases) == snapshot_fingerprint(list(reversed(cases)))

    def test_content_sensitive(self):
        changed = snapshot()
        changed[0] = make_case(id="CASE-1", review_dates=[day(-8)])
        assert snapshot_fingerprint(changed) != snapshot_fingerprint(snapshot())

    def test_content_hash_is_sha256_hex(self):
        assert len(content_hash({"a": 1})) == 64
        assert canonical_json({"b": 1, "a": 2}) == '{"a":2,"b":1}'
