"""Tests for middleware and error rendering — headers, request IDs, JSON errors."""

import pytest
from httpx import ASGITransport, AsyncClient

from publisher.services.work_service import WorkService


@pytest.mark.asyncio
async def test_security_headers_on_health(client):
    """Health endpoint returns security headers."""
    r = await client.get("/api/health")
    assert r.status_code == 200
    assert r.headers["X-Content-Type-Options"] == "nosniff"
    assert r.headers["X-Frame-Options"] == "DENY"
    assert r.headers["Referrer-Policy"] == "strict-origin-when-cross-origin"
    assert "Cache-Control" not in r.headers


@pytest.mark.asyncio
async def test_request_id_generated(client):
    """Each request gets a unique X-Request-ID header."""
    r1 = await client.get("/api/health")
    r2 = await client.get("/api/health")
    assert "X-Request-ID" in r1.headers
    assert "X-Request-ID" in r2.headers
    # Each request gets a unique ID
    assert r1.headers["X-Request-ID"] != r2.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_request_id_propagated(client):
    """Incoming X-Request-ID is propagated through the response."""
    custom_id = "test-trace-12345"
    r = await client.get("/api/health", headers={"X-Request-ID": custom_id})
    assert r.headers["X-Request-ID"] == custom_id


@pytest.mark.asyncio
async def test_no_hsts_on_http(client):
    """HSTS header is NOT set on HTTP connections (only HTTPS)."""
    r = await client.get("/api/health")
    assert "Strict-Transport-Security" not in r.headers


@pytest.mark.asyncio
async def test_hsts_on_https(app):
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="https://test"
    ) as ac:
        r = await ac.get("/api/health")
    assert r.headers["Strict-Transport-Security"].startswith("max-age=")


# ═══════════════════════════════════════════════════════════
# Error bodies
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_unknown_route(client):
    r = await client.get("/api/nowhere")
    assert r.status_code == 404
    assert r.json() == {"error": "Not Found", "message": "Cannot GET /api/nowhere"}


@pytest.mark.asyncio
async def test_unhandled_error_is_json_500(app, monkeypatch):
    async def explode(self, **kwargs):
        raise RuntimeError("catalogue offline")

    monkeypatch.setattr(WorkService, "list_published", explode)
    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as ac:
        r = await ac.get("/api/works")
    assert r.status_code == 500
    assert r.json() == {
        "error": "Internal server error",
        "message": "catalogue offline",
    }
