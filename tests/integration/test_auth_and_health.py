"""
Integration tests for the credential gate, error envelope and health endpoints.
"""

import redis

from conftest import auth_headers
from dealerhub.api.security import create_access_token


class TestCredentialGate:
    def test_missing_credential(self, client):
        response = client.get("/api/orders")

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"
        assert response.json() == {
            "error": {
                "message": "Access denied. No token provided.",
                "type": "AuthenticationError",
                "details": {},
            }
        }

    def test_garbage_token(self, client):
        response = client.get("/api/orders", headers={"Authorization": "Bearer garbage"})

        assert response.status_code == 403

    def test_expired_token(self, client, seller):
        token = create_access_token({"sub": str(seller.id)}, expires_minutes=-1)

        response = client.get("/api/orders", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 403

    def test_token_without_subject(self, client):
        token = create_access_token({"email": "x@example.com"})

        response = client.get("/api/orders", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 403

    def test_non_bearer_scheme(self, client):
        response = client.get("/api/orders", headers={"Authorization": "Basic dXNlcjpwYXNz"})

        assert response.status_code == 401

    def test_cookie_credential(self, client, seller):
        client.cookies.set("token", create_access_token({"sub": str(seller.id)}))

        response = client.get("/api/orders")

        assert response.status_code == 200
        assert response.json() == []

    def test_request_id_is_echoed(self, client, seller):
        response = client.get("/api/orders", headers={**auth_headers(seller), "X-Request-ID": "abc-123"})

        assert response.headers["x-request-id"] == "abc-123"
        assert "x-response-time" in response.headers


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_status_reports_components(self, client):
        body = client.get("/status").json()

        assert body["status"] == "healthy"
        assert body["components"]["database"]["status"] == "healthy"
        assert body["components"]["redis"]["status"] == "healthy"

    def test_status_degraded_without_redis(self, client, fake_redis, monkeypatch):
        def down():
            raise redis.ConnectionError("redis down")

        monkeypatch.setattr(fake_redis, "ping", down)

        body = client.get("/status").json()

        assert body["status"] == "degraded"
        assert body["components"]["redis"]["status"] == "unhealthy"
