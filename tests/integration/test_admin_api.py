"""
Integration tests for the admin gate and the /api/admin endpoints.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import httpx
import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_auth_client
from app.main import app
from core.auth_client import AuthClient
from models.admin import AdminActivity
from models.event import Event


class TestAdminGate:
    def test_missing_token(self, client):
        response = client.get("/api/admin/events")

        assert response.status_code == 403
        assert response.json() == {"message": "Authentication token not provided."}

    def test_non_bearer_header_counts_as_missing(self, client):
        response = client.get("/api/admin/events", headers={"Authorization": "Basic abc"})

        assert response.status_code == 403

    def test_invalid_token(self, client):
        response = client.get("/api/admin/events", headers={"Authorization": "Bearer forged"})

        assert response.status_code == 401
        assert response.json() == {"message": "Invalid or expired token"}

    def test_authenticated_non_admin(self, client, student_headers):
        response = client.get("/api/admin/events", headers=student_headers)

        assert response.status_code == 403
        assert response.json() == {"message": "Admin access required"}

    def test_allow_listed_admin(self, client, admin_headers):
        assert client.get("/api/admin/events", headers=admin_headers).status_code == 200

    def test_role_claim_admin(self, client, role_admin_headers):
        assert client.get("/api/admin/events", headers=role_admin_headers).status_code == 200

    def test_provider_unreachable(self, client, auth_client, admin_headers):
        auth_client.unavailable = True

        response = client.get("/api/admin/events", headers=admin_headers)

        assert response.status_code == 503

    def test_unreadable_provider_reply(self, client, admin_headers):
        app.dependency_overrides[get_auth_client] = lambda: AuthClient("http://auth.test", api_key="anon-key")
        html_page = httpx.Response(200, text="<html>Bad gateway</html>", request=httpx.Request("GET", "http://auth.test"))

        with patch("core.auth_client.httpx.request", return_value=html_page):
            response = client.get("/api/admin/events", headers=admin_headers)

        assert response.status_code == 503
        assert response.json() == {"message": "Authentication service unavailable"}

    def test_unexpected_error_keeps_message_shape(self, client, auth_client, admin_headers, monkeypatch):
        def broken_get_user(token):
            raise RuntimeError("unexpected provider payload")

        monkeypatch.setattr(auth_client, "get_user", broken_get_user)

        response = TestClient(app, raise_server_exceptions=False).get("/api/admin/events", headers=admin_headers)

        assert response.status_code == 500
        assert response.headers["content-type"] == "application/json"
        assert response.json() == {"message": "Internal server error"}


class TestAdminEvents:
    def test_pagination_and_total(self, client, admin_headers, make_event):
        for i in range(5):
            make_event(name=f"Event {i}")

        response = client.get("/api/admin/events", params={"page": 2, "limit": 2}, headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 5
        assert data["page"] == 2
        assert data["limit"] == 2
        assert data["totalPages"] == 3
        assert len(data["events"]) == 2

    def test_status_and_search_filters(self, client, admin_headers, make_event):
        match = make_event(name="Board Games Night", status="pending")
        make_event(name="Board Games Night", status="approved")
        make_event(name="Karaoke", status="pending")

        response = client.get(
            "/api/admin/events",
            params={"status": "pending", "search": "board games"},
            headers=admin_headers,
        )

        assert [e["id"] for e in response.json()["events"]] == [match.id]

    def test_search_matches_description(self, client, admin_headers, make_event):
        match = make_event(name="Mystery", description="Bring your own Lego")
        make_event(name="Other")

        response = client.get("/api/admin/events", params={"search": "lego"}, headers=admin_headers)

        assert [e["id"] for e in response.json()["events"]] == [match.id]

    @pytest.mark.parametrize("params", [{"page": 0}, {"limit": 0}, {"limit": 101}, {"status": "archived"}])
    def test_invalid_query(self, client, admin_headers, params):
        assert client.get("/api/admin/events", params=params, headers=admin_headers).status_code == 400

    def test_patch_rejects_with_reason(self, client, admin_headers, mailer, db_session, make_event):
        event = make_event(status="pending")

        response = client.patch(
            "/api/admin/events",
            json={"eventId": event.id, "status": "rejected", "rejection_reason": "Duplicate listing"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json() == {
            "id": event.id,
            "status": "rejected",
            "rejection_reason": "Duplicate listing",
        }
        assert len(mailer.sent) == 1

        db_session.expire_all()
        activity = db_session.query(AdminActivity).one()
        assert activity.action == "event.rejected"
        assert activity.target_id == event.id
        assert activity.admin_email == "admin@dupulse.test"

    def test_patch_approve_omits_reason(self, client, admin_headers, mailer, make_event):
        event = make_event(status="pending")

        response = client.patch(
            "/api/admin/events",
            json={"eventId": event.id, "status": "approved"},
            headers=admin_headers,
        )

        assert response.json() == {"id": event.id, "status": "approved"}
        assert mailer.sent == []

    def test_patch_requires_status(self, client, admin_headers, make_event):
        response = client.patch("/api/admin/events", json={"eventId": make_event().id}, headers=admin_headers)

        assert response.status_code == 400

    def test_patch_invalid_status(self, client, admin_headers, make_event):
        response = client.patch(
            "/api/admin/events",
            json={"eventId": make_event().id, "status": "done"},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json() == {"message": "Invalid status provided."}

    def test_patch_missing_event(self, client, admin_headers):
        response = client.patch(
            "/api/admin/events",
            json={"eventId": "ghost", "status": "approved"},
            headers=admin_headers,
        )

        assert response.status_code == 404

    def test_delete_event(self, client, admin_headers, db_session, make_event):
        event = make_event(name="Cancelled Ball")

        response = client.delete("/api/admin/events", params={"eventId": event.id}, headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"message": "Event deleted successfully", "eventId": event.id}
        db_session.expire_all()
        assert db_session.query(Event).count() == 0
        assert db_session.query(AdminActivity).one().action == "event.deleted"

    def test_delete_without_id(self, client, admin_headers):
        assert client.delete("/api/admin/events", headers=admin_headers).status_code == 400

    def test_delete_missing_event(self, client, admin_headers):
        response = client.delete("/api/admin/events", params={"eventId": "ghost"}, headers=admin_headers)

        assert response.status_code == 404


class TestAdminUsers:
    def test_users_and_societies_merged(self, client, admin_headers, make_user, make_society):
        make_user(name="Student A")
        make_user(name="Org B", user_type="organization")
        make_society(name="Society C", contact_email="c@societies.test")

        response = client.get("/api/admin/users", headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 3
        roles = {row["name"]: row["role"] for row in data["data"]}
        assert roles == {"Student A": "student", "Org B": "organization", "Society C": "society"}

    def test_role_filter(self, client, admin_headers, make_user, make_society):
        make_user()
        make_society()

        response = client.get("/api/admin/users", params={"role": "society"}, headers=admin_headers)

        assert [row["role"] for row in response.json()["data"]] == ["society"]

    def test_search_and_pagination(self, client, admin_headers, make_user):
        for i in range(3):
            make_user(name=f"Match {i}")
        make_user(name="Other")

        response = client.get(
            "/api/admin/users",
            params={"search": "match", "page": 1, "limit": 2},
            headers=admin_headers,
        )

        data = response.json()
        assert data["count"] == 3
        assert len(data["data"]) == 2

    def test_unknown_role(self, client, admin_headers):
        assert client.get("/api/admin/users", params={"role": "wizard"}, headers=admin_headers).status_code == 400


class TestAdminDashboard:
    def test_daily_counts(self, client, admin_headers, db_session, make_event):
        today = datetime.now(timezone.utc).replace(hour=12, minute=0, second=0, microsecond=0)
        make_event(created_at=today)
        make_event(created_at=today)
        make_event(created_at=today - timedelta(days=2))
        make_event(created_at=today - timedelta(days=30))

        response = client.get("/api/admin/dashboard", params={"days": 3}, headers=admin_headers)

        assert response.status_code == 200
        counts = response.json()
        assert [row["count"] for row in counts] == [1, 0, 2]
        assert counts[-1]["date"] == today.date().isoformat()

    @pytest.mark.parametrize("days", [0, 366])
    def test_days_out_of_range(self, client, admin_headers, days):
        assert client.get("/api/admin/dashboard", params={"days": days}, headers=admin_headers).status_code == 400

    def test_activity_newest_first(self, client, admin_headers, make_event):
        first = make_event(status="pending")
        second = make_event(status="pending")
        client.post(f"/api/events/{first.id}/approve", headers=admin_headers)
        client.post(f"/api/events/{second.id}/reject", headers=admin_headers)

        response = client.get("/api/admin/activity", params={"limit": 1}, headers=admin_headers)

        assert response.status_code == 200
        rows = response.json()
        assert len(rows) == 1
        assert rows[0]["action"] == "event.rejected"
        assert rows[0]["target_id"] == second.id


class TestAdminSettings:
    def test_settings_created_on_first_read(self, client, admin_headers):
        response = client.get("/api/admin/settings", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["key"] == "platform"
        assert response.json()["config"] == {}

    def test_update_settings(self, client, admin_headers):
        config = {"maintenance_mode": True, "featured_categories": ["sports", "music"]}

        response = client.patch("/api/admin/settings", json={"config": config}, headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["config"] == config
        assert client.get("/api/admin/settings", headers=admin_headers).json()["config"] == config

    def test_update_requires_config_object(self, client, admin_headers):
        response = client.patch("/api/admin/settings", json={"config": "on"}, headers=admin_headers)

        assert response.status_code == 400

    def test_system_status(self, client, admin_headers):
        response = client.get("/api/admin/system", headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["api"] == "ok"
        assert data["db"] == "ok"
        assert "ts" in data
