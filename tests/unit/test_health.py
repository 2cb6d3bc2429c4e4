"""Tests for the health check, CORS headers and the catch-all error path.

Exercises the FastAPI app through an async HTTP client.
"""

import pytest
from fastapi import APIRouter
from httpx import ASGITransport, AsyncClient

from soapscribe.api.app import create_app


@pytest.fixture
def app():
    """Create a fresh FastAPI application instance."""
    return create_app()


@pytest.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


# ---------------------------------------------------------------------------
# Health check
# ---------------------------------------------------------------------------


async def test_health_returns_200(client):
    """GET /health returns 200 with status, version, and timestamp."""
    resp = await client.get("/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["version"] == "0.1.0"
    assert "timestamp" in body


# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------


async def test_cors_allows_streamlit_origin(client):
    """Streamlit's default origin (localhost:8501) is in the CORS allow-list."""
    resp = await client.options(
        "/health",
        headers={
            "Origin": "http://localhost:8501",
            "Access-Control-Request-Method": "GET",
        },
    )
    assert resp.headers.get("access-control-allow-origin") == "http://localhost:8501"


async def test_cors_rejects_unknown_origin(client):
    resp = await client.options(
        "/health",
        headers={
            "Origin": "http://evil.example",
            "Access-Control-Request-Method": "GET",
        },
    )
    assert "access-control-allow-origin" not in resp.headers


# ---------------------------------------------------------------------------
# Unexpected errors
# ---------------------------------------------------------------------------


def _app_with_failing_route(message: str):
    app = create_app()
    router = APIRouter()

    @router.get("/boom")
    async def boom():
        raise RuntimeError(message)

    app.include_router(router)
    return app


async def _get_boom(app):
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        return await c.get("/boom")


async def test_unexpected_error_is_generic_500():
    resp = await _get_boom(_app_with_failing_route("kaboom"))

    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to process audio. Please try again."}


async def test_unexpected_error_classified_by_text():
    resp = await _get_boom(_app_with_failing_route("read ECONNRESET"))

    assert resp.status_code == 500
    assert resp.json()["error"].startswith("Connection error with OpenAI API")
