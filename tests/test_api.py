"""
Tests for the HTTP API via TestClient.

State is installed directly with set_state, so the startup hook (which
reads the environment) does not run.
"""
import pytest
from fastapi.testclient import TestClient

from api.main import app
from api.session import OverlayStore
from api.state import ServiceState, set_state
from rtwpilot.exceptions import CaseListUnavailableError
from rtwpilot.models import CaseStatus, UserRole
from rtwpilot.records import InMemoryCaseRepository, StaticIdentityProvider

from tests.conftest import day, make_case, make_note, make_task, make_user

NOW_PARAM = {"now": "2024-06-15T09:30:00Z"}


def _cases():
    return [
        make_case(id="CASE-1", review_dates=[day(-9)], supervisor_notes=[make_note()]),
        make_case(id="CASE-2", consultant="consultant-2", tasks=[make_task(due_offset=-2)]),
        make_case(id="CASE-3", status=CaseStatus.PENDING, injury_offset=-1, documents=[]),
    ]


def _users():
    return [
        make_user(),
        make_user(id="admin-1", name="Sarah Mitchell", role=UserRole.ADMIN),
    ]


class BrokenRepository:
    def list_cases(self):
        raise CaseListUnavailableError(message="Case store offline")


@pytest.fixture
def client():
    set_state(ServiceState(
        repository=InMemoryCaseRepository(_cases()),
        identity=StaticIdentityProvider(_users()),
    ))
    yield TestClient(app)
    set_state(None)


class TestHealth:
    """Tests for /health."""

    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["healthy"] is True
        assert data["users_loaded"] == 2


class TestNotificationEndpoints:
    """Tests for /notifications."""

    def test_list(self, client):
        resp = client.get("/notifications", params={"user_id": "consultant-1", **NOW_PARAM})
        assert resp.status_code == 200
        data = resp.json()

        assert data["user_id"] == "consultant-1"
        assert data["filter"] == "all"
        assert data["notifications"][0]["priority"] == "critical"
        assert data["badges"]["supervisor_unread"] == 1
        assert data["diagnostics"] == []

    def test_filter(self, client):
        resp = client.get(
            "/notifications",
            params={"user_id": "consultant-1", "filter": "supervisor", **NOW_PARAM},
        )
        data = resp.json()

        assert [n["category"] for n in data["notifications"]] == ["supervisor"]
        # Badges ignore the filter
        assert data["badges"]["unread"] > 1

    def test_unknown_user(self, client):
        resp = client.get("/notifications", params={"user_id": "nobody", **NOW_PARAM})
        assert resp.status_code == 404
        assert resp.json()["detail"]["code"] == "RTW_UNKNOWN_USER"

    def test_repository_unavailable(self, client):
        set_state(ServiceState(
            repository=BrokenRepository(),
            identity=StaticIdentityProvider(_users()),
        ))
        resp = client.get("/notifications", params={"user_id": "consultant-1", **NOW_PARAM})

        assert resp.status_code == 503
        assert resp.json()["detail"]["code"] == "RTW_CASE_LIST_UNAVAILABLE"

    def test_read_and_dismiss_flow(self, client):
        params = {"user_id": "consultant-1", **NOW_PARAM}
        headers = {"X-Session-Id": "session-a"}
        notifications = client.get("/notifications", params=params, headers=headers).json()["notifications"]
        first, second = notifications[0]["id"], notifications[1]["id"]

        resp = client.post(f"/notifications/{first}/read", headers=headers)
        assert resp.json()["read_ids"] == [first]
        client.post(f"/notifications/{second}/dismiss", headers=headers)

        after = client.get("/notifications", params=params, headers=headers).json()["notifications"]
        by_id = {n["id"]: n for n in after}
        assert by_id[first]["read"] is True
        assert second not in by_id

        # Another session is unaffected
        other = client.get("/notifications", params=params, headers={"X-Session-Id": "session-b"})
        assert all(not n["read"] for n in other.json()["notifications"])

    def test_unread(self, client):
        headers = {"X-Session-Id": "session-c"}
        client.post("/notifications/some-id/read", headers=headers)
        resp = client.post("/notifications/some-id/unread", headers=headers)
        assert resp.json()["read_ids"] == []

    def test_read_all_and_badges(self, client):
        params = {"user_id": "consultant-1", **NOW_PARAM}
        headers = {"X-Session-Id": "session-d"}

        client.post("/notifications/read-all", params=params, headers=headers)
        badges = client.get("/notifications/badges", params=params, headers=headers).json()

        assert badges["unread"] == 0
        assert badges["supervisor_unread"] == 0
        assert badges["critical"] == 1

    def test_write_without_session_rejected(self, client):
        params = {"user_id": "consultant-1", **NOW_PARAM}
        [target] = [
            n["id"] for n in client.get("/notifications", params=params).json()["notifications"]
            if n["case_id"] == "CASE-3" and n["title"] == "Documents Missing"
        ]

        for path in (f"/notifications/{target}/dismiss", f"/notifications/{target}/read"):
            resp = client.post(path)
            assert resp.status_code == 400
            assert resp.json()["detail"]["code"] == "RTW_SESSION_REQUIRED"
        assert client.post("/notifications/read-all", params=params).status_code == 400

        admin = client.get("/notifications", params={"user_id": "admin-1", **NOW_PARAM})
        assert target in [n["id"] for n in admin.json()["notifications"]]

    def test_read_without_session_ignores_other_sessions(self, client):
        params = {"user_id": "consultant-1", **NOW_PARAM}
        client.post("/notifications/read-all", params=params, headers={"X-Session-Id": "session-e"})

        data = client.get("/notifications", params=params).json()
        assert all(not n["read"] for n in data["notifications"])
        assert data["badges"]["unread"] == len(data["notifications"])


class TestOverlayStore:
    """Tests for the session overlay store."""

    def test_unknown_or_missing_session_is_empty(self):
        store = OverlayStore()
        assert store.get(None).read_ids == frozenset()
        assert store.get("nobody").dismissed_ids == frozenset()

    def test_least_recently_used_evicted(self):
        store = OverlayStore(max_sessions=2)
        store.update("a", lambda o: o.mark_read("n-1"))
        store.update("b", lambda o: o.mark_read("n-2"))
        store.get("a")
        store.update("c", lambda o: o.mark_read("n-3"))

        assert len(store) == 2
        assert store.get("a").read_ids == frozenset({"n-1"})
        assert store.get("b").read_ids == frozenset()
        assert store.get("c").read_ids == frozenset({"n-3"})

    def test_rejects_empty_bound(self):
        with pytest.raises(ValueError):
            OverlayStore(max_sessions=0)


class TestQualityControlEndpoints:
    """Tests for /flags and /performance."""

    def test_flags(self, client):
        resp = client.get("/flags", params=NOW_PARAM)
        assert resp.status_code == 200
        flags = resp.json()

        assert flags[0]["severity"] == "critical"
        assert all(f["flag_type"] != "supervisor_note" for f in flags)
        names = {f["case_id"]: f["consultant_name"] for f in flags}
        assert names["CASE-2"] == "Unknown"
        assert names["CASE-1"] == "James Carter (consultant)"

    def test_flag_filters(self, client):
        resp = client.get(
            "/flags",
            params={"consultant_id": "consultant-2", "min_severity": "high", **NOW_PARAM},
        )
        assert [f["case_id"] for f in resp.json()] == ["CASE-2"]

    def test_invalid_severity(self, client):
        resp = client.get("/flags", params={"min_severity": "urgent", **NOW_PARAM})
        assert resp.status_code == 422

    def test_performance(self, client):
        data = {p["consultant_id"]: p for p in client.get("/performance", params=NOW_PARAM).json()}
        assert "CASE-1" in data["consultant-1"]["flagged_cases"]
        assert data["consultant-2"]["overdue_actions"] == 1


class TestWorkloadEndpoints:
    """Tests for /workloads and /urgent-tasks."""

    def test_workloads(self, client):
        data = client.get("/workloads", params=NOW_PARAM).json()

        assert [w["consultant_id"] for w in data] == ["consultant-1", "consultant-2"]
        mine = data[0]
        assert mine["total_cases"] == 2
        assert mine["active_cases"] == 2
        assert mine["urgent_cases"] == 2
        assert mine["band"] == "normal"
        assert mine["needs_attention"] is False

    def test_urgent_tasks(self, client):
        data = client.get("/urgent-tasks", params=NOW_PARAM).json()

        assert [(t["case_id"], t["task_type"]) for t in data] == [
            ("CASE-1", "overdue_review"),
            ("CASE-3", "compliance_issue"),
            ("CASE-2", "urgent_rtw"),
        ]


class TestServiceStartup:
    """Tests for build_state and the demo data."""

    def test_demo_state_without_case_file(self, monkeypatch):
        from api.main import CASES_ENV_VAR, build_state

        monkeypatch.delenv(CASES_ENV_VAR, raising=False)
        monkeypatch.delenv("RTWPILOT_CONFIG", raising=False)
        state = build_state()

        assert [c.id for c in state.cases()] == ["CASE-1001", "CASE-1002", "CASE-1003", "CASE-1004"]
        assert state.identity.get_user("admin-1").role == UserRole.ADMIN

    def test_file_state(self, monkeypatch, tmp_path):
        from api.main import CASES_ENV_VAR, build_state

        path = tmp_path / "cases.yaml"
        path.write_text(
            "users:\n"
            "  - {id: consultant-1, name: James Carter}\n"
            "cases:\n"
            "  - id: CASE-9\n"
            "    worker: {firstName: Mei, lastName: Tanaka}\n"
            "    consultant: consultant-1\n"
            "    injuryDate: 2024-05-01\n"
        )
        monkeypatch.setenv(CASES_ENV_VAR, str(path))
        monkeypatch.delenv("RTWPILOT_CONFIG", raising=False)
        state = build_state()

        assert [c.id for c in state.cases()] == ["CASE-9"]
        assert state.directory().display_name_for("consultant-1") == "James Carter (consultant)"
