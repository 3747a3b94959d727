from __future__ import annotations

from fastapi import status
from helpers import API, bearer
from httpx import AsyncClient


async def test_health_reports_backend(client: AsyncClient) -> None:
    response = await client.get("/health")

    assert response.status_code == status.HTTP_200_OK
    payload = response.json()
    assert payload["message"] == "TaskFlow API is running"
    assert payload["data"]["status"] == "ok"
    assert payload["data"]["storageBackend"] == "memory"
    assert payload["data"]["timestamp"]


async def test_metadata_without_token_has_no_viewer(client: AsyncClient, settings) -> None:
    response = await client.get(f"{API}/metadata")

    data = response.json()["data"]
    assert data["name"] == settings.project_name
    assert data["environment"] == "test"
    assert data["apiPrefix"] == "/api"
    assert data["viewer"] is None


async def test_metadata_reports_authenticated_viewer(client: AsyncClient, alice) -> None:
    response = await client.get(f"{API}/metadata", headers=alice["headers"])

    assert response.json()["data"]["viewer"]["email"] == "alice@example.com"


async def test_metadata_ignores_invalid_token(client: AsyncClient) -> None:
    response = await client.get(f"{API}/metadata", headers=bearer("not-a-jwt"))

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["data"]["viewer"] is None
