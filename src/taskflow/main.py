"""Entry point for the TaskFlow API."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routers import api_router, health_router
from .core.config import Settings, get_settings
from .core.events import EventBus
from .core.logging import configure_logging
from .core.middleware import CorrelationIdMiddleware
from .core.security import TokenService, configure_password_hashing
from .db import close_document_store, init_document_store
from .deps import OptionalUserDependency, SettingsDependency
from .errors import register_exception_handlers
from .repositories import build_repositories
from .schemas import Envelope, RootResponse, UserPublic
from .services import TaskCounterSync


def _normalise_prefix(raw_prefix: str) -> str:
    prefix = raw_prefix.strip()
    if prefix and not prefix.startswith("/"):
        prefix = f"/{prefix}"
    prefix = prefix.rstrip("/")
    return prefix


def create_app(settings: Settings | None = None) -> FastAPI:
    """Instantiate and configure the FastAPI application."""

    settings = settings or get_settings()
    configure_logging(settings)
    configure_password_hashing(settings.password_hash_rounds)

    router_prefix = _normalise_prefix(settings.api_prefix)
    openapi_url = f"{router_prefix}/openapi.json"
    uses_mongo = settings.storage_backend == "mongo"

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        if uses_mongo:
            await init_document_store(settings)
        try:
            yield
        finally:
            if uses_mongo:
                await close_document_store()

    application = FastAPI(
        title=settings.project_name,
        version=settings.version,
        summary="Task, project and team tracking API.",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url=openapi_url,
        lifespan=lifespan,
    )

    repositories = build_repositories(settings)
    event_bus = EventBus()
    counter_sync = TaskCounterSync(repositories.users, repositories.tasks)
    counter_sync.register(event_bus)

    application.state.settings = settings
    application.state.repositories = repositories
    application.state.event_bus = event_bus
    application.state.counter_sync = counter_sync
    application.state.token_service = TokenService(settings.token_settings())

    application.add_middleware(CorrelationIdMiddleware)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    application.include_router(api_router, prefix=router_prefix)
    application.include_router(health_router)

    register_exception_handlers(application)

    @application.get(
        f"{router_prefix}/metadata",
        response_model=Envelope[RootResponse],
        summary="Service metadata",
        tags=["health"],
    )
    async def read_api_metadata(
        app_settings: SettingsDependency,
        viewer: OptionalUserDependency,
    ) -> Envelope[RootResponse]:
        """Expose minimal service metadata, plus the caller when a valid token is sent."""

        return Envelope[RootResponse](
            data=RootResponse(
                name=app_settings.project_name,
                environment=app_settings.environment,
                version=app_settings.version,
                api_prefix=router_prefix or "/",
                viewer=UserPublic.model_validate(viewer) if viewer is not None else None,
            )
        )

    return application


def run() -> None:
    """Convenience entry point for ``taskflow-api``."""

    settings = get_settings()
    uvicorn.run(
        "taskflow.main:create_app",
        factory=True,
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.reload,
        log_config=None,
    )
