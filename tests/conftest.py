from __future__ import annotations

import os
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any

os.environ.setdefault("TASKFLOW_JWT_SECRET_KEY", "test-secret-key")
os.environ["TASKFLOW_STORAGE_BACKEND"] = "memory"
os.environ["TASKFLOW_ENVIRONMENT"] = "test"

import pytest
from fastapi import FastAPI
from helpers import API, bearer
from httpx import ASGITransport, AsyncClient

from taskflow.core.config import Settings, get_settings
from taskflow.main import create_app

RegisterUser = Callable[..., Awaitable[dict[str, Any]]]


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> None:
    get_settings.cache_clear()


@pytest.fixture()
def settings() -> Settings:
    return Settings(environment="test", storage_backend="memory", jwt_secret_key="test-secret-key")


@pytest.fixture()
def app(settings: Settings) -> FastAPI:
    return create_app(settings)


@pytest.fixture()
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http_client:
        yield http_client


@pytest.fixture()
def register_user(client: AsyncClient) -> RegisterUser:
    """Register a user through the API and return its user, token and headers."""

    async def _register(
        name: str = "Alice Johnson",
        email: str = "alice@example.com",
        password: str = "secret123",
    ) -> dict[str, Any]:
        response = await client.post(
            f"{API}/auth/register",
            json={"name": name, "email": email, "password": password},
        )
        assert response.status_code == 201, response.text
        data = response.json()["data"]
        return {"user": data["user"], "token": data["token"], "headers": bearer(data["token"])}

    return _register


@pytest.fixture()
async def alice(register_user: RegisterUser) -> dict[str, Any]:
    return await register_user()


@pytest.fixture()
async def bob(register_user: RegisterUser) -> dict[str, Any]:
    return await register_user(name="Bob Smith", email="bob@example.com", password="hunter22")
