from __future__ import annotations

from datetime import timedelta

import pytest
from jose import jwt

from taskflow.core.security import (
    TokenService,
    TokenSettings,
    configure_password_hashing,
    get_password_hash,
    verify_password,
)
from taskflow.errors import InvalidTokenError

SECRET = "unit-test-secret"


@pytest.fixture()
def token_service() -> TokenService:
    return TokenService(TokenSettings(secret_key=SECRET))


def test_password_hash_round_trip() -> None:
    configure_password_hashing(4)
    hashed = get_password_hash("secret123")

    assert hashed != "secret123"
    assert hashed.startswith("$2")
    assert verify_password("secret123", hashed) is True
    assert verify_password("secret124", hashed) is False


def test_password_hashes_are_salted() -> None:
    configure_password_hashing(4)

    assert get_password_hash("secret123") != get_password_hash("secret123")


def test_verify_password_treats_malformed_hash_as_mismatch() -> None:
    assert verify_password("secret123", "not-a-bcrypt-hash") is False


def test_token_round_trip(token_service: TokenService) -> None:
    issued = token_service.issue("665f1c2e8b3e4a0012345678")

    assert token_service.verify(issued.token) == "665f1c2e8b3e4a0012345678"
    claims = jwt.get_unverified_claims(issued.token)
    assert claims["type"] == "access"
    assert claims["jti"] == issued.jti
    assert claims["exp"] == int(issued.expires_at.timestamp())


def test_default_expiry_is_seven_days(token_service: TokenService) -> None:
    issued = token_service.issue("user-1")
    claims = jwt.get_unverified_claims(issued.token)

    assert claims["exp"] - claims["iat"] == int(timedelta(days=7).total_seconds())


def test_expired_token_is_rejected(token_service: TokenService) -> None:
    issued = token_service.issue("user-1", expires_delta=timedelta(seconds=-5))

    with pytest.raises(InvalidTokenError):
        token_service.verify(issued.token)


def test_token_with_foreign_signature_is_rejected(token_service: TokenService) -> None:
    foreign = TokenService(TokenSettings(secret_key="another-secret")).issue("user-1")

    with pytest.raises(InvalidTokenError):
        token_service.verify(foreign.token)


def test_garbage_token_is_rejected(token_service: TokenService) -> None:
    with pytest.raises(InvalidTokenError):
        token_service.verify("definitely.not.a-token")


def test_token_of_unknown_type_is_rejected(token_service: TokenService) -> None:
    forged = jwt.encode(
        {"sub": "user-1", "iat": 1, "exp": 4_102_444_800, "jti": "x", "type": "refresh"},
        SECRET,
        algorithm="HS256",
    )

    with pytest.raises(InvalidTokenError):
        token_service.verify(forged)


def test_token_without_subject_is_rejected(token_service: TokenService) -> None:
    forged = jwt.encode(
        {"iat": 1, "exp": 4_102_444_800, "jti": "x", "type": "access"},
        SECRET,
        algorithm="HS256",
    )

    with pytest.raises(InvalidTokenError):
        token_service.verify(forged)


def test_token_service_requires_a_secret() -> None:
    with pytest.raises(ValueError):
        TokenService(TokenSettings(secret_key=""))
