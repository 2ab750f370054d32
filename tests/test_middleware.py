"""Tests for request-id, security-header and origin middleware."""

from __future__ import annotations

from fastapi.testclient import TestClient

from waitlist_api.core.app_factory import create_app
from waitlist_api.core.config import settings
from waitlist_api.core.middleware import SECURITY_HEADERS

ALLOWED_ORIGIN = "https://meetcasa.com"


def test_preserves_incoming_request_id_header(client: TestClient):
    incoming_id = "test-request-id-123"
    resp = client.get("/health", headers={"X-Request-ID": incoming_id})

    assert resp.status_code == 200
    assert resp.headers.get("X-Request-ID") == incoming_id


def test_generates_request_id_when_missing(client: TestClient):
    resp = client.get("/health")

    generated = resp.headers.get("X-Request-ID")
    assert generated
    assert resp.headers.get("X-Request-Duration-ms") is not None


def test_error_body_carries_request_id(client: TestClient):
    resp = client.post(
        "/api/waitlist",
        json={"type": "fax"},
        headers={"X-Request-ID": "req-abc"},
    )

    assert resp.status_code == 400
    assert resp.json()["error"]["request_id"] == "req-abc"


def test_request_id_header_name_comes_from_app_settings(store, limiter):
    cfg = settings.model_copy(deep=True)
    cfg.log.request_id_header = "X-Correlation-ID"
    client = TestClient(create_app(cfg, store=store, rate_limiter=limiter, configure_logs=False))

    resp = client.get("/health", headers={"X-Correlation-ID": "corr-abc"})

    assert resp.status_code == 200
    assert resp.headers.get("X-Correlation-ID") == "corr-abc"
    assert "X-Request-ID" not in resp.headers


def test_security_headers_on_every_response(client: TestClient):
    ok = client.get("/health")
    bad = client.post("/api/waitlist", json={})

    for resp in (ok, bad):
        for name, value in SECURITY_HEADERS.items():
            assert resp.headers.get(name) == value


class TestOriginGuard:
    def test_request_without_origin_is_allowed(self, client: TestClient):
        resp = client.post("/api/waitlist", json={"contact": "jane@example.com", "type": "email"})

        assert resp.status_code == 201

    def test_allowed_origin_gets_cors_headers(self, client: TestClient):
        resp = client.post(
            "/api/waitlist",
            json={"contact": "jane@example.com", "type": "email"},
            headers={"Origin": ALLOWED_ORIGIN},
        )

        assert resp.status_code == 201
        assert resp.headers.get("access-control-allow-origin") == ALLOWED_ORIGIN

    def test_unknown_origin_is_rejected_before_any_write(self, client: TestClient, entry_count, limiter):
        resp = client.post(
            "/api/waitlist",
            json={"contact": "jane@example.com", "type": "email"},
            headers={"Origin": "https://evil.example"},
        )

        assert resp.status_code == 403
        assert resp.json()["error"]["code"] == "origin_not_allowed"
        assert "access-control-allow-origin" not in resp.headers
        assert entry_count() == 0
        assert len(limiter) == 0

    def test_preflight_from_allowed_origin(self, client: TestClient):
        resp = client.options(
            "/api/waitlist",
            headers={
                "Origin": ALLOWED_ORIGIN,
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "Content-Type",
            },
        )

        assert resp.status_code == 200
        assert resp.headers.get("access-control-allow-origin") == ALLOWED_ORIGIN

    def test_preflight_from_unknown_origin(self, client: TestClient):
        resp = client.options(
            "/api/waitlist",
            headers={
                "Origin": "https://evil.example",
                "Access-Control-Request-Method": "POST",
            },
        )

        assert resp.status_code == 403
