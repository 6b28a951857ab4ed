"""Tests for the health, ping and version endpoints."""

from datetime import datetime


async def test_health_check(client):
    response = await client.get("/api/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    datetime.fromisoformat(body["timestamp"])


async def test_ping(client):
    response = await client.get("/api/ping")

    assert response.status_code == 200
    assert response.text == "pong"


async def test_version(client):
    response = await client.get("/api/version")

    assert response.json() == {"name": "cgplayer", "version": "1.0.0"}


async def test_unknown_api_route(client):
    response = await client.get("/api/does-not-exist")

    assert response.status_code == 404
    assert response.json() == {"detail": "API route not found"}


async def test_openapi_is_served_under_api(client):
    response = await client.get("/api/openapi.json")

    assert response.status_code == 200
    assert response.json()["info"]["title"] == "cgplayer"
