"""
Route tests — FastAPI TestClient over a mocked backend.

The per-request gateway dependency is overridden with one whose transport
is the ``MockBackend`` from conftest.
"""

import json
from typing import Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from suitepulse.ai.base_provider import AIProvider
from suitepulse.ai.claude_provider import ClaudeProvider, build_prompt
from suitepulse.api.ai_routes import get_provider
from suitepulse.api.dependencies import get_gateway
from suitepulse.main import app

AUTH = {"Authorization": "Bearer user-token"}


def seed_backend(backend, revenue_status=200):
    """Happy-path rows for every table the snapshot reads."""
    backend.add("GET", "/auth/v1/user", httpx.Response(200, json={"id": "u1"}))
    backend.add("GET", "/rest/v1/profiles", httpx.Response(200, json=[{"user_id": "u1", "role": "user"}]))
    backend.add(
        "GET",
        "/rest/v1/tasks",
        httpx.Response(
            200,
            json=[
                {"id": "1", "user_id": "u1", "status": "completed", "points": 10},
                {"id": "2", "user_id": "u1", "status": "completed", "points": 10},
                {"id": "3", "user_id": "u1", "status": "todo"},
                {"id": "4", "user_id": "u1", "status": "in_progress"},
            ],
        ),
    )
    backend.add(
        "GET",
        "/rest/v1/user_revenue",
        httpx.Response(
            revenue_status,
            json=[{"id": "r1", "revenue_amount": 1200, "transaction_date": "2026-08-10"}]
            if revenue_status == 200
            else {"message": "relation unavailable"},
        ),
    )
    backend.add("GET", "/rest/v1/user_stats", httpx.Response(200, json=[{"user_id": "u1", "total_points": 60}]))
    backend.add("GET", "/rest/v1/rank_tiers", httpx.Response(200, json=[]))
    backend.add(
        "POST",
        "/functions/v1/tasks",
        httpx.Response(200, json={"data": {"sessions": [], "stats": {"total_sessions": 2, "total_minutes": 90}}}),
    )


@pytest.fixture
def client(backend, make_gateway):
    async def _gateway():
        gateway = make_gateway(max_retries=1)
        try:
            yield gateway
        finally:
            await gateway.close()

    app.dependency_overrides[get_gateway] = _gateway
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestHealth:
    """System endpoints."""

    def test_health(self):
        response = TestClient(app).get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["service"] == "suitepulse"
        assert "backend_connected" in body

    def test_registry_lists_every_metric(self):
        response = TestClient(app).get("/metrics/registry")
        assert response.status_code == 200
        metrics = {m["name"]: m for m in response.json()["metrics"]}
        assert metrics["completion_rate"]["composite"] is True
        assert metrics["total_revenue"]["source"] == "revenue"


class TestAuth:
    """Bearer handling before any reconciliation."""

    def test_missing_bearer_is_401(self):
        response = TestClient(app).get("/metrics/unified")
        assert response.status_code == 401

    def test_rejected_token_is_401(self, client, backend):
        backend.add("GET", "/auth/v1/user", httpx.Response(401, json={"msg": "invalid JWT"}))
        response = client.get("/metrics/unified", headers=AUTH)
        assert response.status_code == 401

    def test_auth_backend_down_is_502(self, client, backend):
        backend.add("GET", "/auth/v1/user", httpx.Response(503, json={"message": "down"}))
        response = client.get("/metrics/unified", headers=AUTH)
        assert response.status_code == 502


class TestUnifiedMetrics:
    """GET /metrics/unified end to end."""

    def test_all_sources_live(self, client, backend):
        seed_backend(backend)
        response = client.get("/metrics/unified", headers=AUTH)

        assert response.status_code == 200
        body = response.json()
        metrics = body["metrics"]
        assert metrics["total_tasks"] == 4
        assert metrics["completed_tasks"] == 2
        assert metrics["completion_rate"] == 50.0
        assert metrics["total_revenue"] == 1200
        assert metrics["current_rank"] == "Recruit Tier 2"
        assert metrics["total_focus_minutes"] == 90
        assert metrics["focus_hours"] == 1.5
        assert not any(body["degraded"].values())
        assert body["error"] is None

    def test_backend_failure_degrades_one_slice(self, client, backend):
        seed_backend(backend, revenue_status=500)
        response = client.get("/metrics/unified", headers=AUTH)

        assert response.status_code == 200
        body = response.json()
        assert body["degraded"]["revenue"] is True
        assert body["errors"] == {"revenue": "backend"}
        assert body["metrics"]["total_revenue"] == 0
        assert body["metrics"]["completed_tasks"] == 2
        assert body["error"] == "1 of 4 sources offline: revenue"

    def test_unreachable_ladder_keeps_gamification_live(self, client, backend):
        seed_backend(backend)
        backend.add("GET", "/rest/v1/rank_tiers", httpx.ConnectError("connection refused"))
        response = client.get("/metrics/unified", headers=AUTH)

        assert response.status_code == 200
        body = response.json()
        assert body["degraded"]["gamification"] is False
        assert body["metrics"]["total_points"] == 60
        assert body["metrics"]["current_rank"] == "Recruit Tier 2"

    def test_date_range_limits_task_figures(self, client, backend):
        seed_backend(backend)
        response = client.get(
            "/metrics/unified",
            params={"start_date": "2026-08-31", "end_date": "2026-08-01"},
            headers=AUTH,
        )

        assert response.status_code == 200
        metrics = response.json()["metrics"]
        assert metrics["total_tasks"] == 4
        # seeded completions carry no completed_at, so none fall in the window
        assert metrics["completed_tasks"] == 0
        params = backend.calls("/rest/v1/tasks")[0].url.params
        assert params.get_list("created_at") == ["gte.2026-08-01", "lte.2026-08-31T23:59:59"]

    @pytest.mark.parametrize(
        "params",
        [
            {"start_date": "2026-08-01"},
            {"start_date": "2026-02-30", "end_date": "2026-03-01"},
            {"start_date": "08/01/2026", "end_date": "2026-08-31"},
        ],
    )
    def test_bad_date_range_is_422(self, client, backend, params):
        seed_backend(backend)
        response = client.get("/metrics/unified", params=params, headers=AUTH)
        assert response.status_code == 422
        assert backend.calls("/rest/v1/tasks") == []

    def test_snapshot_team_activity_serializes_as_list(self, client, backend):
        seed_backend(backend)
        response = client.get("/metrics/unified", headers=AUTH)
        team = response.json()["metrics"]["team_activity"]
        assert [m["user_id"] for m in team] == ["u1"]
        assert team[0]["completed_tasks"] == 2

    def test_levels_fall_back_to_builtin_ladder(self, client, backend):
        backend.add("GET", "/rest/v1/rank_tiers", httpx.Response(200, json=[]))
        response = client.get("/metrics/levels", headers=AUTH)
        assert response.status_code == 200
        tiers = response.json()
        assert len(tiers) == 33
        assert tiers[0]["name"] == "Recruit Tier 1"


class TestAnalytics:
    """Summary handlers."""

    def test_task_analytics_scoped_to_caller(self, client, backend):
        seed_backend(backend)
        response = client.get(
            "/analytics/tasks",
            params={"start_date": "2026-08-01", "end_date": "2026-08-07"},
            headers=AUTH,
        )
        assert response.status_code == 200
        body = response.json()
        assert body["date_range_start"] == "2026-08-01"
        assert body["tasks"]["total"] == 4
        assert len(body["tasks"]["trend"]) == 7
        params = backend.calls("/rest/v1/tasks")[0].url.params
        assert params["user_id"] == "eq.u1"
        assert params.get_list("created_at") == ["gte.2026-08-01", "lte.2026-08-07T23:59:59"]

    def test_invalid_period_is_422(self, client, backend):
        seed_backend(backend)
        response = client.get("/analytics/revenue", params={"period": "decade"}, headers=AUTH)
        assert response.status_code == 422

    def test_finance_summary(self, client, backend):
        seed_backend(backend)
        backend.add(
            "GET",
            "/rest/v1/invoices",
            httpx.Response(200, json=[{"id": "i1", "total_amount": 500, "status": "paid"}]),
        )
        backend.add(
            "GET",
            "/rest/v1/expenses",
            httpx.Response(200, json=[{"id": "e1", "amount": 120, "category": "software"}]),
        )
        response = client.get("/analytics/finance", params={"period": "quarter"}, headers=AUTH)
        assert response.status_code == 200
        body = response.json()
        assert body["invoices"]["paid"] == 1
        assert body["net_income"] == 380

    def test_malformed_rows_are_502(self, client, backend):
        seed_backend(backend)
        backend.add("GET", "/rest/v1/user_revenue", httpx.Response(200, json=[{"revenue_amount": 5}]))
        response = client.get("/analytics/revenue", headers=AUTH)
        assert response.status_code == 502
        assert response.json()["error"]["kind"] == "shape"


class FakeProvider(AIProvider):
    def __init__(self):
        self.seen: Optional[dict] = None

    def is_available(self) -> bool:
        return True

    async def generate_summary(self, snapshot_json, question=None):
        self.seen = snapshot_json
        return f"briefing ({question or 'general'})"


class TestSummary:
    """POST /metrics/summary."""

    def test_summary_uses_fresh_snapshot(self, client, backend):
        seed_backend(backend)
        provider = FakeProvider()
        app.dependency_overrides[get_provider] = lambda: provider

        response = client.post("/metrics/summary", json={"question": "how was my week?"}, headers=AUTH)

        assert response.status_code == 200
        body = response.json()
        assert body["summary"] == "briefing (how was my week?)"
        assert provider.seen["metrics"]["total_tasks"] == 4

    def test_unconfigured_provider_is_503(self, client, backend):
        seed_backend(backend)
        response = client.post("/metrics/summary", json={}, headers=AUTH)
        assert response.status_code == 503

    def test_prompt_names_offline_sources(self):
        prompt = build_prompt(
            {"metrics": {"total_revenue": 0}, "degraded": {"revenue": True, "tasks": False}},
            question="Did I hit target?",
        )
        assert "Offline sources: revenue" in prompt
        assert '"Did I hit target?"' in prompt
        assert '"total_revenue": 0' in prompt

    def test_unkeyed_provider_is_unavailable(self):
        assert not ClaudeProvider().is_available()
        assert ClaudeProvider(api_key="sk-test").is_available()


class TestSuiteRoutes:
    """Thin routes over the per-entity services."""

    def test_crm_pipeline(self, client, backend):
        backend.add(
            "GET",
            "/rest/v1/deals",
            httpx.Response(
                200,
                json=[
                    {"id": "d1", "stage": "Closed Won", "value": 1000},
                    {"id": "d2", "stage": "Proposal", "value": 3000},
                ],
            ),
        )
        response = client.get("/crm/pipeline", headers=AUTH)
        assert response.status_code == 200
        body = response.json()
        assert body["won_deals"] == 1
        assert body["pipeline_value"] == 3000
        assert body["conversion_rate"] == 50

    def test_unread_notifications_are_scoped_to_caller(self, client, backend):
        seed_backend(backend)
        backend.add(
            "GET",
            "/rest/v1/notifications",
            httpx.Response(200, json=[{"id": "n1", "user_id": "u1", "title": "Task due"}]),
        )
        response = client.get("/notifications", params={"unread_only": "true"}, headers=AUTH)
        assert response.status_code == 200
        assert response.json()["notifications"][0]["title"] == "Task due"
        params = backend.calls("/rest/v1/notifications")[0].url.params
        assert params["user_id"] == "eq.u1"
        assert params["read_at"] == "is.null"

    def test_marking_unknown_notification_is_404(self, client, backend):
        seed_backend(backend)
        backend.add("PATCH", "/rest/v1/notifications", httpx.Response(200, json=[]))
        response = client.post("/notifications/n404/read", headers=AUTH)
        assert response.status_code == 404

    def test_leaderboard(self, client, backend):
        backend.add(
            "POST",
            "/functions/v1/get-leaderboard",
            httpx.Response(200, json={"data": {"leaderboard": [{"user_id": "u2", "total_points": 900}]}}),
        )
        response = client.get("/leaderboard", headers=AUTH)
        assert response.status_code == 200
        assert response.json()["leaderboard"][0]["total_points"] == 900

    def test_user_list_requires_admin(self, client, backend):
        seed_backend(backend)
        response = client.get("/users", headers=AUTH)
        assert response.status_code == 403
        assert backend.calls("/functions/v1/user-management") == []

    def test_admin_lists_users(self, client, backend):
        seed_backend(backend)
        backend.add("GET", "/rest/v1/profiles", httpx.Response(200, json=[{"user_id": "u1", "role": "admin"}]))
        backend.add(
            "POST",
            "/functions/v1/user-management",
            httpx.Response(200, json={"data": [{"user_id": "u1", "role": "admin"}, {"user_id": "u2"}]}),
        )
        response = client.get("/users", headers=AUTH)
        assert response.status_code == 200
        assert [u["user_id"] for u in response.json()["users"]] == ["u1", "u2"]

    def test_revenue_targets_carry_status(self, client, backend):
        seed_backend(backend)
        backend.add(
            "GET",
            "/rest/v1/revenue_targets",
            httpx.Response(
                200,
                json=[
                    {"user_id": "u1", "target_amount": 1000, "achievement_amount": 800},
                    {"user_id": "u1", "target_amount": 1000, "achievement_amount": 1500},
                ],
            ),
        )
        response = client.get("/revenue/targets", headers=AUTH)
        assert response.status_code == 200
        targets = response.json()["targets"]
        assert [(t["progress"], t["status"]) for t in targets] == [(80, "on_track"), (100, "achieved")]

    def test_unknown_revenue_type_is_422(self, client, backend):
        seed_backend(backend)
        response = client.post("/revenue", json={"amount": 10, "revenue_type": "lottery"}, headers=AUTH)
        assert response.status_code == 422
        assert backend.calls("/rest/v1/user_revenue") == []

    def test_no_active_focus_session(self, client, backend):
        backend.add("POST", "/functions/v1/tasks", httpx.Response(200, json={"data": {"session": None}}))
        response = client.get("/focus/active", headers=AUTH)
        assert response.status_code == 200
        assert response.json() == {"session": None}

    def test_complete_task_forwards_id(self, client, backend):
        backend.add("POST", "/functions/v1/complete-task", httpx.Response(200, json={"data": {"id": "t1"}}))
        response = client.post("/tasks/t1/complete", headers=AUTH)
        assert response.status_code == 200
        assert json.loads(backend.calls("/functions/v1/complete-task")[0].content) == {"task_id": "t1"}

    def test_points_for_action(self):
        response = TestClient(app).get(
            "/gamification/points", params={"action": "task_completed", "priority": "urgent"}
        )
        assert response.json() == {"action": "task_completed", "points": 15}
