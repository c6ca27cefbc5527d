import pytest
from fastapi.testclient import TestClient

from stylu.config import settings
from stylu.core.exceptions import UpstreamError
from stylu.main import app
from stylu.routers import push
from stylu.routers.outfits import router as outfit_router

from conftest import auth_headers

OUTFIT_ENDPOINTS = sorted(
    (method, route.path.replace("{outfit_id}", "1"))
    for route in outfit_router.routes
    for method in route.methods
)


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "supabase": "configured", "firebase": "disabled"}


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["docs"] == "/docs"


def test_unknown_route_uses_standard_error_shape(client):
    response = client.get("/api/Nope")
    assert response.status_code == 404
    assert response.json() == {"success": False, "error_code": "NOT_FOUND", "message": "Not Found"}


def test_upstream_error_keeps_status_and_body():
    error = UpstreamError(409, '{"code":"23505"}')
    assert error.status_code == 409
    assert error.details == {"upstream_status": 409, "body": '{"code":"23505"}'}


@pytest.mark.parametrize("method, path", OUTFIT_ENDPOINTS)
def test_every_outfit_route_requires_auth(client, method, path):
    response = client.request(method, path, json={})
    assert response.status_code == 401
    assert response.json()["error_code"] == "AUTHENTICATION_ERROR"


def test_outfit_router_exposes_all_endpoints():
    assert {path for _, path in OUTFIT_ENDPOINTS} == {"/api/Outfit", "/api/Outfit/1", "/api/Outfit/1/items"}
    assert len(OUTFIT_ENDPOINTS) == 5


@pytest.fixture
def limited():
    push.limiter.reset()
    push.limiter.enabled = True
    try:
        yield push.limiter
    finally:
        push.limiter.enabled = settings.RATE_LIMIT_ENABLED
        push.limiter.reset()


def test_push_endpoints_are_rate_limited(client, limited):
    allowed = int(settings.PUSH_RATE_LIMIT.split("/")[0])
    payload = {"userId": "u1", "title": "t", "body": "b"}

    statuses = [client.post("/api/PushNotification/save", json=payload).status_code for _ in range(allowed + 2)]

    assert statuses[:allowed] == [201] * allowed
    assert statuses[allowed:] == [429, 429]
    body = client.post("/api/PushNotification/save", json=payload).json()
    assert body["success"] is False
    assert body["error_code"] == "RATE_LIMIT_ERROR"


def _explode(*args, **kwargs):
    raise RuntimeError("database exploded")


def test_unhandled_error_hides_details_outside_development(client, supabase, monkeypatch):
    monkeypatch.setattr(supabase, "select", _explode)
    unsafe_client = TestClient(app, raise_server_exceptions=False)

    response = unsafe_client.get("/api/Outfit", headers=auth_headers())

    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "error_code": "INTERNAL_ERROR",
        "message": "An unexpected error occurred",
    }


def test_unhandled_error_shows_details_in_development(client, supabase, monkeypatch):
    monkeypatch.setattr(supabase, "select", _explode)
    monkeypatch.setattr(settings, "ENVIRONMENT", "development")
    unsafe_client = TestClient(app, raise_server_exceptions=False)

    response = unsafe_client.get("/api/Outfit", headers=auth_headers())

    assert response.status_code == 500
    body = response.json()
    assert body["error_code"] == "INTERNAL_ERROR"
    assert body["message"] == "database exploded"
    assert "traceback" in body["details"]
