"""Password hashing and bearer token helpers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any
from uuid import uuid4

from jose import JWTError, jwt
from passlib.context import CryptContext
from passlib.exc import UnknownHashError
from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from ..errors import InvalidTokenError

logger = logging.getLogger(__name__)

DEFAULT_HASH_ROUNDS = 12

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=DEFAULT_HASH_ROUNDS,
)


def configure_password_hashing(rounds: int) -> None:
    """Change the bcrypt work factor used for new hashes."""

    pwd_context.update(bcrypt__rounds=rounds)


def get_password_hash(password: str) -> str:
    """Return a salted bcrypt hash of ``password``."""

    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Return ``True`` when ``plain_password`` matches ``hashed_password``.

    A malformed stored hash counts as a mismatch.
    """

    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (UnknownHashError, ValueError):
        logger.warning("Stored password hash could not be parsed.")
        return False


class TokenType(str, Enum):
    """Token kinds understood by ``TokenService``."""

    ACCESS = "access"


@dataclass(frozen=True, slots=True)
class TokenSettings:
    """Signing configuration handed to ``TokenService`` at construction."""

    secret_key: str
    algorithm: str = "HS256"
    expires_delta: timedelta = timedelta(days=7)


@dataclass(slots=True)
class IssuedToken:
    """A signed token and the instant it stops being accepted."""

    token: str
    expires_at: datetime
    jti: str


class TokenClaims(BaseModel):
    model_config = ConfigDict(extra="ignore")

    sub: str
    exp: datetime
    iat: datetime
    jti: str
    type: TokenType


class TokenService:
    """Issue and verify HS256 access tokens naming a user id.

    Tokens are stateless. Nothing is revoked server-side; a token stays valid
    until its ``exp`` claim passes.
    """

    def __init__(self, settings: TokenSettings) -> None:
        if not settings.secret_key:
            raise ValueError("TokenService requires a non-empty secret key")
        self._settings = settings

    @property
    def expires_delta(self) -> timedelta:
        return self._settings.expires_delta

    def issue(self, user_id: str, *, expires_delta: timedelta | None = None) -> IssuedToken:
        now = datetime.now(timezone.utc)
        expire = now + (expires_delta if expires_delta is not None else self._settings.expires_delta)
        payload: dict[str, Any] = {
            "sub": str(user_id),
            "iat": now,
            "exp": expire,
            "type": TokenType.ACCESS.value,
            "jti": uuid4().hex,
        }
        token = jwt.encode(payload, self._settings.secret_key, algorithm=self._settings.algorithm)
        return IssuedToken(token=token, expires_at=expire, jti=payload["jti"])

    def verify(self, token: str) -> str:
        """Return the user id named by ``token`` or raise ``InvalidTokenError``."""

        try:
            payload = jwt.decode(
                token,
                self._settings.secret_key,
                algorithms=[self._settings.algorithm],
            )
        except JWTError as exc:
            raise InvalidTokenError() from exc

        try:
            claims = TokenClaims.model_validate(payload)
        except PydanticValidationError as exc:
            raise InvalidTokenError() from exc

        if claims.type is not TokenType.ACCESS or not claims.sub:
            raise InvalidTokenError()
        return claims.sub


__all__ = [
    "IssuedToken",
    "TokenClaims",
    "TokenService",
    "TokenSettings",
    "TokenType",
    "configure_password_hashing",
    "get_password_hash",
    "verify_password",
]
