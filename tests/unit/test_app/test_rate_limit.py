"""
test_rate_limit.py - slowapi 기반 rate limit 테스트
"""

from fastapi.testclient import TestClient

from src.app.main import create_app
from src.app.rate_limit import build_limiter
from src.core.config import RateLimitConfig, Settings


def make_client(mock_provider, **rate_limit) -> TestClient:
    settings = Settings(
        openai_api_key="sk-test",
        rate_limit=RateLimitConfig(**rate_limit),
    )
    return TestClient(create_app(settings, provider=mock_provider))


class TestBuildLimiter:
    def test_default_limit(self):
        limiter = build_limiter(RateLimitConfig())

        assert limiter.enabled is True

    def test_disabled(self):
        limiter = build_limiter(RateLimitConfig(enabled=False))

        assert limiter.enabled is False


class TestRateLimit:
    """고정 윈도우 rate limit 테스트."""

    def test_limit_exceeded_returns_429(self, mock_provider):
        with make_client(mock_provider, requests=3, window_seconds=60) as client:
            statuses = [client.get("/api/health").status_code for _ in range(4)]

            response = client.get("/api/health")

        assert statuses == [200, 200, 200, 429]
        assert response.status_code == 429
        assert response.json()["error"] == "rate_limited"

    def test_shared_across_api_paths(self, mock_provider):
        with make_client(mock_provider, requests=2, window_seconds=60) as client:
            assert client.get("/api/health").status_code == 200
            assert client.post("/api/chat", json={"messages": []}).status_code == 200
            assert client.post("/api/summarize", json={"messages": []}).status_code == 429

    def test_preflight_not_counted(self, mock_provider):
        with make_client(mock_provider, requests=1, window_seconds=60) as client:
            for _ in range(5):
                client.options("/api/chat", headers={"Origin": "http://localhost:5500"})

            assert client.get("/api/health").status_code == 200

    def test_disabled_limit(self, mock_provider):
        with make_client(mock_provider, enabled=False, requests=1) as client:
            statuses = {client.get("/api/health").status_code for _ in range(5)}

        assert statuses == {200}

    def test_limits_are_per_app(self, mock_provider):
        """카운터는 앱 인스턴스마다 따로."""
        with make_client(mock_provider, requests=1) as client:
            assert client.get("/api/health").status_code == 200
            assert client.get("/api/health").status_code == 429

        with make_client(mock_provider, requests=1) as client:
            assert client.get("/api/health").status_code == 200

    def test_default_31st_request_limited(self, mock_provider):
        """기본 설정 (30회/60초): 31번째 /api 요청부터 429, 경로 무관."""
        settings = Settings(openai_api_key="sk-test")
        with TestClient(create_app(settings, provider=mock_provider)) as client:
            statuses = [client.get("/api/health").status_code for _ in range(30)]
            over_health = client.get("/api/health")
            over_chat = client.post("/api/chat", json={"messages": []})

        assert statuses == [200] * 30
        assert over_health.status_code == 429
        assert over_chat.status_code == 429
        assert over_chat.json()["error"] == "rate_limited"
        assert over_chat.json()["detail"].startswith("Rate limit exceeded: 30 per 60")
        mock_provider.create_chat_completion.assert_not_called()

    def test_non_api_paths_not_counted(self, mock_provider):
        with make_client(mock_provider, requests=1) as client:
            for _ in range(5):
                client.get("/healthz")

            assert client.get("/api/health").status_code == 200

    def test_rejection_carries_cors_and_security_headers(self, mock_provider):
        with make_client(mock_provider, requests=1) as client:
            client.get("/api/health")
            response = client.get("/api/health", headers={"Origin": "http://localhost:5500"})

        assert response.status_code == 429
        assert response.headers["Access-Control-Allow-Origin"] == "http://localhost:5500"
        assert response.headers["X-Content-Type-Options"] == "nosniff"
