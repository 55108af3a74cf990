"""
Tests for rate limiting
"""
from app.core import rate_limit
from app.core.config import settings
from app.main import app


class TestRateLimiting:
    """Tests for rate limiting"""

    def test_rate_limit_config(self):
        assert settings.RATE_LIMIT_ENABLED is False
        assert settings.AUTH_RATE_LIMIT
        assert app.state.limiter is rate_limit.limiter

    def test_disabled_limit_leaves_route_untouched(self):
        def endpoint():
            return "ok"

        assert rate_limit.limiter.limit("1/minute")(endpoint) is endpoint

    def test_enabled_limit_wraps_route(self, monkeypatch):
        monkeypatch.setattr(settings, "RATE_LIMIT_ENABLED", True)

        def endpoint(request):
            return "ok"

        assert rate_limit.limit("1/minute")(endpoint) is not endpoint

    def test_health_endpoint_no_rate_limit(self, client):
        for _ in range(3):
            assert client.get("/api/health/").status_code == 200
            assert client.get("/api/health/live").status_code == 200
            assert client.get("/api/health/ready").status_code == 200

    def test_repeated_logins_allowed_when_disabled(self, client, alice):
        for _ in range(15):
            response = client.post(
                "/api/auth/login", json={"username": "alice", "password": "password123"}
            )
            assert response.status_code == 200
