from __future__ import annotations

from datetime import timedelta
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any, Literal, Sequence

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from .. import __version__ as package_version
from .security import TokenSettings

PROJECT_ROOT = Path(__file__).resolve().parents[3]

EnvironmentName = Literal["development", "test", "ci"]
StorageBackendName = Literal["mongo", "memory"]

_ENVIRONMENT_ALIASES: dict[str, EnvironmentName] = {
    "development": "development",
    "dev": "development",
    "test": "test",
    "testing": "test",
    "ci": "ci",
}

_ENVIRONMENT_PROFILES: dict[EnvironmentName, dict[str, Any]] = {
    "development": {
        "log_level": "DEBUG",
        "reload": True,
        "password_hash_rounds": 12,
    },
    "test": {
        "log_level": "WARNING",
        "reload": False,
        "password_hash_rounds": 4,
    },
    "ci": {
        "log_level": "INFO",
        "reload": False,
        "password_hash_rounds": 12,
    },
}


class Settings(BaseSettings):
    """Runtime configuration for the TaskFlow API.

    Every field is read from a ``TASKFLOW_``-prefixed environment variable or a
    ``.env`` file at the project root. ``jwt_secret_key`` has no default: the
    application refuses to start without it.
    """

    model_config = SettingsConfigDict(
        env_prefix="TASKFLOW_",
        env_file=(PROJECT_ROOT / ".env", ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    project_name: str = "TaskFlow API"
    environment: EnvironmentName = "development"
    api_prefix: str = "/api"
    version: str = package_version
    app_host: str = "0.0.0.0"
    app_port: int = 5000
    log_level: str = "INFO"
    reload: bool = True

    cors_allow_origins: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"],
    )
    cors_allow_credentials: bool = True
    cors_allow_methods: Annotated[list[str], NoDecode] = Field(default_factory=lambda: ["*"])
    cors_allow_headers: Annotated[list[str], NoDecode] = Field(default_factory=lambda: ["*"])

    storage_backend: StorageBackendName = "mongo"
    mongo_url: str = "mongodb://localhost:27017"
    mongo_database: str = "taskflow"
    activity_ttl_seconds: int = 60 * 60 * 24 * 90

    jwt_secret_key: str
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7
    password_hash_rounds: int = 12

    @field_validator("environment", mode="before")
    @classmethod
    def _normalise_environment(cls, value: object) -> EnvironmentName:
        if isinstance(value, str):
            normalized = value.strip().lower()
        else:
            normalized = ""
        if not normalized:
            normalized = "development"
        return _ENVIRONMENT_ALIASES.get(normalized, "development")

    @field_validator("storage_backend", mode="before")
    @classmethod
    def _normalise_storage_backend(cls, value: object) -> str:
        if isinstance(value, str):
            return value.strip().lower()
        return "mongo"

    @field_validator("activity_ttl_seconds", mode="before")
    @classmethod
    def _normalise_activity_ttl(cls, value: object) -> int:
        try:
            ttl = int(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return 60 * 60 * 24 * 90
        return max(ttl, 1)

    @field_validator("access_token_expire_minutes", mode="before")
    @classmethod
    def _ensure_positive_expiry(cls, value: object) -> int:
        try:
            minutes = int(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return 60 * 24 * 7
        return max(minutes, 1)

    @field_validator("password_hash_rounds", mode="before")
    @classmethod
    def _clamp_hash_rounds(cls, value: object) -> int:
        try:
            rounds = int(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return 12
        return min(max(rounds, 4), 31)

    @field_validator("jwt_secret_key", mode="before")
    @classmethod
    def _require_secret(cls, value: object) -> str:
        secret = str(value or "").strip()
        if not secret:
            raise ValueError("jwt_secret_key must be configured")
        return secret

    @field_validator(
        "cors_allow_origins",
        "cors_allow_methods",
        "cors_allow_headers",
        mode="before",
    )
    @classmethod
    def _coerce_comma_separated(cls, value: object) -> list[str]:
        """Allow comma separated strings for CORS configuration."""

        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        if isinstance(value, Sequence):
            return [str(item) for item in value if str(item).strip()]
        return []

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalise_log_level(cls, value: object) -> str:
        if not isinstance(value, str):
            return "INFO"
        return value.upper()

    @model_validator(mode="after")
    def _apply_environment_profile(self) -> "Settings":
        profile = _ENVIRONMENT_PROFILES[self.environment]
        fields_set = set(getattr(self, "model_fields_set", set()))
        for field_name, value in profile.items():
            if field_name not in fields_set:
                setattr(self, field_name, value)
        return self

    def token_settings(self) -> TokenSettings:
        """Build the explicit token configuration handed to ``TokenService``."""

        return TokenSettings(
            secret_key=self.jwt_secret_key,
            algorithm=self.jwt_algorithm,
            expires_delta=timedelta(minutes=self.access_token_expire_minutes),
        )


@lru_cache()
def get_settings() -> Settings:
    """Return a cached ``Settings`` instance."""

    return Settings()
