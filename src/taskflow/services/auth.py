"""Authentication service encapsulating registration, login and credentials."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import status

from ..activity import ActivityAction, ActivityLogService
from ..core.security import IssuedToken, TokenService, get_password_hash, verify_password
from ..errors import (
    DuplicateEmailError,
    InvalidCredentialsError,
    InvalidTokenError,
    NotFoundError,
    ValidationError,
)
from ..models import ProfilePatch, User, UserBase, utcnow
from ..repositories.base import UserStore
from .common import build_model, changed_fields, merge_changes

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


@dataclass(slots=True)
class AuthResult:
    """A user together with a freshly issued access token."""

    user: User
    token: IssuedToken


def _check_password_length(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError("Password must be at least 6 characters long.")


class AuthService:
    """Registration, login and credential management.

    Login reports one error for an unknown email and for a wrong password.
    Registration does tell the caller that an email is taken.
    """

    def __init__(
        self,
        users: UserStore,
        tokens: TokenService,
        activity: ActivityLogService,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._activity = activity

    async def register(self, *, name: str, email: str, password: str) -> AuthResult:
        _check_password_length(password)
        if await self._users.get_by_email(email) is not None:
            raise DuplicateEmailError()
        now = utcnow()
        draft = build_model(
            UserBase,
            {
                "name": name,
                "email": email,
                "hashed_password": get_password_hash(password),
                "created_at": now,
                "updated_at": now,
            },
        )
        user = await self._users.add(draft)
        logger.info("User registered", extra={"target_user_id": user.id})
        await self._activity.record_registration(user)
        return AuthResult(user=user, token=self._tokens.issue(user.id))

    async def login(self, *, email: str, password: str) -> AuthResult:
        user = await self._users.get_by_email(email)
        if user is None or not verify_password(password, user.hashed_password):
            raise InvalidCredentialsError()
        user = await self._users.touch_login(user.id, utcnow())
        if user is None:
            raise InvalidCredentialsError()
        await self._activity.record_login(user)
        return AuthResult(user=user, token=self._tokens.issue(user.id))

    async def get_profile(self, user_id: str) -> User:
        user = await self._users.get(user_id)
        if user is None:
            raise NotFoundError("User not found.")
        return user

    async def update_profile(self, user_id: str, patch: ProfilePatch) -> User:
        current = await self.get_profile(user_id)
        changes = patch.changes()
        if "email" in changes:
            existing = await self._users.get_by_email(changes["email"])
            if existing is not None and existing.id != user_id:
                raise ValidationError("Email is already in use.")
        merged = merge_changes(current, changes, now=utcnow())
        try:
            user = await self._users.update(user_id, changed_fields(merged, changes))
        except DuplicateEmailError as exc:
            raise ValidationError("Email is already in use.") from exc
        if user is None:
            raise NotFoundError("User not found.")
        await self._activity.record_user_change(
            action=ActivityAction.PROFILE_UPDATED,
            actor_id=user_id,
            user=user,
            changes=changes,
        )
        return user

    async def change_password(self, user_id: str, *, current_password: str, new_password: str) -> None:
        user = await self.get_profile(user_id)
        if not verify_password(current_password, user.hashed_password):
            raise InvalidCredentialsError(
                "Current password is incorrect.",
                status_code=status.HTTP_400_BAD_REQUEST,
            )
        _check_password_length(new_password)
        updated = await self._users.update(
            user_id,
            {"hashed_password": get_password_hash(new_password), "updated_at": utcnow()},
        )
        if updated is None:
            raise NotFoundError("User not found.")
        await self._activity.record_user_change(
            action=ActivityAction.PASSWORD_CHANGED,
            actor_id=user_id,
            user=updated,
        )

    async def verify_token(self, token: str) -> User:
        """Resolve ``token`` to its user; every failure is ``InvalidTokenError``."""
        user_id = self._tokens.verify(token)
        user = await self._users.get(user_id)
        if user is None:
            raise InvalidTokenError("User no longer exists.")
        return user


__all__ = ["AuthResult", "AuthService"]
