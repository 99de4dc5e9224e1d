"""Integration tests for general HTTP behaviour: health, errors, middleware, users."""

import logging

from app.config import get_settings


class TestGeneralEndpoints:
    async def test_home(self, client):
        resp = await client.get("/")

        assert resp.status_code == 200
        body = resp.json()
        assert body["message"] == "Welcome to VibeStorm"
        assert body["status"] == "running"

    async def test_health(self, client):
        resp = await client.get("/api/v1/health")

        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "healthy"
        assert body["service"] == "VibeStorm"
        assert body["version"] == "1.0.0"


class TestMiddleware:
    async def test_request_id_is_generated(self, client):
        resp = await client.get("/api/v1/health")
        assert resp.headers["x-request-id"]

    async def test_request_id_is_echoed(self, client):
        resp = await client.get("/api/v1/health", headers={"X-Request-ID": "req-abc-123"})
        assert resp.headers["x-request-id"] == "req-abc-123"

    async def test_request_id_appears_in_error_body(self, client):
        resp = await client.get("/api/v1/auth/me", headers={"X-Request-ID": "req-err-1"})
        assert resp.json()["request_id"] == "req-err-1"

    async def test_security_headers(self, client):
        resp = await client.get("/api/v1/health")

        assert resp.headers["x-content-type-options"] == "nosniff"
        assert resp.headers["x-frame-options"] == "DENY"
        assert resp.headers["referrer-policy"] == "strict-origin-when-cross-origin"
        assert "strict-transport-security" not in resp.headers


class TestErrorResponses:
    async def test_unknown_route(self, client):
        resp = await client.get("/api/v1/does-not-exist")

        assert resp.status_code == 404
        body = resp.json()
        assert body["error"] is True
        assert body["code"] == "NOT_FOUND"
        assert body["message"] == "Resource not found"
        assert body["path"] == "/api/v1/does-not-exist"

    async def test_wrong_method(self, client):
        resp = await client.delete("/api/v1/health")

        assert resp.status_code == 405
        assert resp.json()["code"] == "METHOD_NOT_ALLOWED"

    async def test_unparseable_body_is_client_error(self, client):
        resp = await client.post(
            "/api/v1/auth/signin",
            content=b'{"email": "\xff", "password": "x"}',
            headers={"Content-Type": "application/json"},
        )

        assert resp.status_code == 400
        body = resp.json()
        assert body["code"] == "INVALID_REQUEST"
        assert body["message"] == "Invalid request format"

    async def test_oversized_body_is_rejected(self, client):
        resp = await client.post(
            "/api/v1/auth/signin",
            content=b"x" * (get_settings().max_body_bytes + 1),
            headers={"Content-Type": "application/json"},
        )

        assert resp.status_code == 413
        body = resp.json()
        assert body["code"] == "PAYLOAD_TOO_LARGE"
        assert body["path"] == "/api/v1/auth/signin"

    async def test_rate_limited_route_uses_error_envelope(self, auth_client):
        for _ in range(31):
            resp = await auth_client.get(
                "/api/v1/auth/me", headers={"X-Request-ID": "req-limit"}
            )

        assert resp.status_code == 429
        body = resp.json()
        assert body["error"] is True
        assert body["code"] == "TOO_MANY_REQUESTS"
        assert body["path"] == "/api/v1/auth/me"
        assert body["request_id"] == "req-limit"
        assert body["details"]["limit"] == "30 per 1 minute"


class TestUsersEndpoints:
    async def test_requires_authentication(self, client):
        resp = await client.get("/api/v1/users")

        assert resp.status_code == 401
        assert resp.headers["www-authenticate"] == "Bearer"

    async def test_authentication_checked_before_body(self, client):
        resp = await client.post("/api/v1/users", json={})
        assert resp.status_code == 401

    async def test_list_not_available(self, auth_client):
        resp = await auth_client.get("/api/v1/users", params={"page": 2, "per_page": 20})

        assert resp.status_code == 501
        body = resp.json()
        assert body["code"] == "NOT_IMPLEMENTED"
        assert body["message"] == "User management is not available"

    async def test_list_query_is_validated(self, auth_client):
        resp = await auth_client.get("/api/v1/users", params={"per_page": 500})

        assert resp.status_code == 400
        assert "per_page" in resp.json()["validation"]

    async def test_create_body_is_validated(self, auth_client):
        resp = await auth_client.post(
            "/api/v1/users",
            json={
                "email": "bob@vibestorm.io",
                "username": "bob",
                "password": "weak",
                "first_name": "Bob",
                "last_name": "Builder",
            },
        )

        assert resp.status_code == 400
        assert "password" in resp.json()["validation"]

    async def test_item_routes_not_available(self, auth_client):
        get_resp = await auth_client.get("/api/v1/users/user-9")
        put_resp = await auth_client.put("/api/v1/users/user-9", json={"first_name": "Bo"})
        delete_resp = await auth_client.delete("/api/v1/users/user-9")

        assert get_resp.status_code == 501
        assert put_resp.status_code == 501
        assert delete_resp.status_code == 501

    async def test_actions_are_audit_logged(self, auth_client, caplog):
        caplog.set_level(logging.INFO, logger="audit")

        await auth_client.delete("/api/v1/users/user-9")

        audit_lines = [r.getMessage() for r in caplog.records if r.name == "audit"]
        assert len(audit_lines) == 1
        assert "action=delete_user" in audit_lines[0]
        assert "user_id=user-123" in audit_lines[0]
