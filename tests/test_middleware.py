from datetime import timedelta

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from app.core.middleware import ModerationGate, build_moderation_gate, client_ip
from app.core.rate_limiter import InMemoryRateLimiter
from app.shared.utils.security import create_access_token
from tests.fakes import FakeFlags


class RecordingTracker:
    def __init__(self):
        self.ai_requests = []

    async def track_ai_request(self, event):
        self.ai_requests.append(event)
        return True


def token(role="MODERATOR", permissions=None, sub="mod_1"):
    return create_access_token(
        {"sub": sub, "role": role, "permissions": permissions or []}, timedelta(minutes=5)
    )


def make_app(gate: ModerationGate) -> FastAPI:
    app = FastAPI()
    app.middleware("http")(gate)

    @app.get("/api/moderation/queue")
    async def queue():
        return {"items": []}

    @app.post("/api/moderation/reports")
    async def report():
        return {"ok": True}

    @app.post("/api/moderation/ai-check")
    async def ai_check():
        return {"flagged": False}

    @app.get("/api/admin/moderation/analytics/summary")
    async def summary(request: Request):
        return {"user": request.state.user["sub"]}

    @app.post("/api/admin/moderation/actions")
    async def actions(request: Request):
        return {"user": request.state.user["sub"]}

    @app.get("/api/other")
    async def other():
        return {"ok": True}

    return app


@pytest.fixture
def gate_flags():
    return FakeFlags()


@pytest.fixture
def tracker():
    return RecordingTracker()


@pytest.fixture
def gate(gate_flags, tracker):
    return ModerationGate(
        general_limiter=InMemoryRateLimiter(20, 10),
        ai_limiter=InMemoryRateLimiter(10, 10),
        general_max_body=1_000_000,
        ai_max_body=100_000,
        flags=gate_flags,
        tracker=tracker,
    )


@pytest.fixture
def client(gate):
    return TestClient(make_app(gate))


def test_unrelated_paths_bypass_the_gate(client):
    response = client.get("/api/other")

    assert response.status_code == 200
    assert "X-RateLimit-Limit" not in response.headers
    assert "Cache-Control" not in response.headers


def test_rate_limit_headers_on_success(client):
    response = client.get("/api/moderation/queue")

    assert response.status_code == 200
    assert response.headers["X-RateLimit-Limit"] == "20"
    assert response.headers["X-RateLimit-Remaining"] == "19"
    assert "X-RateLimit-Reset" in response.headers


def test_twenty_first_request_is_rejected(client):
    for _ in range(20):
        assert client.get("/api/moderation/queue").status_code == 200

    response = client.get("/api/moderation/queue")

    assert response.status_code == 429
    assert response.headers["X-RateLimit-Remaining"] == "0"
    assert response.json()["error"] == "Too many requests"


def test_rate_limit_is_per_client_ip(client):
    for _ in range(20):
        client.get("/api/moderation/queue", headers={"X-Forwarded-For": "10.0.0.1"})

    assert client.get("/api/moderation/queue", headers={"X-Forwarded-For": "10.0.0.1"}).status_code == 429
    assert client.get("/api/moderation/queue", headers={"X-Forwarded-For": "10.0.0.2"}).status_code == 200


def test_ai_routes_use_their_own_limit(client):
    for _ in range(10):
        assert client.post("/api/moderation/ai-check", json={}).status_code == 200

    assert client.post("/api/moderation/ai-check", json={}).status_code == 429
    assert client.get("/api/moderation/queue").status_code == 200


def test_rate_limiting_can_be_switched_off(client, gate_flags):
    gate_flags.values["enableRateLimiting"] = False

    for _ in range(25):
        response = client.get("/api/moderation/queue")

    assert response.status_code == 200
    assert "X-RateLimit-Limit" not in response.headers


def test_non_json_body_is_rejected(client):
    response = client.post("/api/moderation/reports", content="hello", headers={"Content-Type": "text/plain"})

    assert response.status_code == 415
    assert response.json() == {
        "error": "Invalid content type",
        "message": "Content-Type must be application/json",
    }


def test_oversized_body_is_rejected(gate_flags):
    gate = ModerationGate(
        general_limiter=InMemoryRateLimiter(20, 10),
        ai_limiter=InMemoryRateLimiter(10, 10),
        general_max_body=1_000_000,
        ai_max_body=64,
        flags=gate_flags,
    )
    client = TestClient(make_app(gate))

    assert client.post("/api/moderation/reports", json={"text": "x" * 200}).status_code == 200
    response = client.post("/api/moderation/ai-check", json={"text": "x" * 200})

    assert response.status_code == 413
    assert response.json()["error"] == "Content too large"


def test_rate_limit_runs_before_validation(gate_flags):
    gate = ModerationGate(
        general_limiter=InMemoryRateLimiter(1, 10),
        ai_limiter=InMemoryRateLimiter(1, 10),
        general_max_body=1_000_000,
        ai_max_body=100_000,
        flags=gate_flags,
    )
    client = TestClient(make_app(gate))
    client.get("/api/moderation/queue")

    response = client.post("/api/moderation/reports", content="x", headers={"Content-Type": "text/plain"})

    assert response.status_code == 429


def test_validation_runs_before_authorization(client):
    response = client.post(
        "/api/admin/moderation/actions", content="x", headers={"Content-Type": "text/plain"}
    )

    assert response.status_code == 415


def test_admin_routes_require_a_session(client):
    response = client.get("/api/admin/moderation/analytics/summary")

    assert response.status_code == 403
    assert response.json()["error"] == "Unauthorized"


def test_admin_routes_reject_plain_users(client):
    response = client.get(
        "/api/admin/moderation/analytics/summary",
        headers={"Authorization": f"Bearer {token(role='USER')}"},
    )

    assert response.status_code == 403


def test_admin_routes_reject_bad_tokens(client):
    response = client.get(
        "/api/admin/moderation/analytics/summary", headers={"Authorization": "Bearer not-a-jwt"}
    )

    assert response.status_code == 403


@pytest.mark.parametrize(
    "role,permissions",
    [("MODERATOR", []), ("ADMIN", []), ("USER", ["MODERATE_CONTENT"]), ("USER", ["MODERATE_ALL"])],
)
def test_admin_routes_accept_moderators(client, role, permissions):
    response = client.post(
        "/api/admin/moderation/actions",
        json={},
        headers={"Authorization": f"Bearer {token(role=role, permissions=permissions)}"},
    )

    assert response.status_code == 200
    assert response.json() == {"user": "mod_1"}


def test_session_cookie_is_accepted(client):
    client.cookies.set("session_token", token())

    response = client.get("/api/admin/moderation/analytics/summary")

    assert response.status_code == 200


def test_short_term_cache_headers(client):
    response = client.get("/api/moderation/queue")

    assert response.headers["Cache-Control"] == "s-maxage=10, stale-while-revalidate=60"


def test_analytics_paths_are_cached_longer(client):
    response = client.get(
        "/api/admin/moderation/analytics/summary",
        headers={"Authorization": f"Bearer {token()}"},
    )

    assert response.headers["Cache-Control"] == "s-maxage=300, stale-while-revalidate=1800"


def test_writes_are_not_cached(client):
    response = client.post("/api/moderation/reports", json={})

    assert "Cache-Control" not in response.headers


def test_edge_caching_flag(client, gate_flags):
    gate_flags.values["enableEdgeCaching"] = False

    response = client.get("/api/moderation/queue")

    assert "Cache-Control" not in response.headers


def test_ai_requests_are_tracked(client, tracker):
    client.post("/api/moderation/ai-check?contentType=post&contentId=p1", json={})

    assert len(tracker.ai_requests) == 1
    event = tracker.ai_requests[0]
    assert event.content_type == "post"
    assert event.content_id == "p1"
    assert event.endpoint == "/api/moderation/ai-check"


def test_rejected_requests_are_not_tracked(client, tracker):
    client.post("/api/moderation/ai-check", content="x", headers={"Content-Type": "text/plain"})

    assert tracker.ai_requests == []


def test_classify_routes(gate):
    assert gate.classify("/api/other") is None
    assert gate.classify("/api/moderationx") is None
    assert gate.classify("/api/moderation/queue").namespace == "moderation"
    assert gate.classify("/api/admin/moderation/ai/check").namespace == "ai-moderation"
    assert gate.classify("/api/admin/moderation/bulk").is_admin is True
    assert gate.classify("/api/moderation/ai-check").is_admin is False


def test_build_moderation_gate_uses_settings():
    from app.core.config import LocalConfig

    gate = build_moderation_gate(LocalConfig())

    assert isinstance(gate.general_limiter, InMemoryRateLimiter)
    assert gate.general_limiter.limit == 20
    assert gate.ai_limiter.limit == 10
    assert gate.ai_max_body == 100_000


def test_client_ip_prefers_forwarded_header():
    class Dummy:
        headers = {"X-Forwarded-For": "1.1.1.1, 2.2.2.2"}
        client = None

    assert client_ip(Dummy()) == "1.1.1.1"
