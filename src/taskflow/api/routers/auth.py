"""Routes handling registration, login and the caller's own profile."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...deps import AuthServiceDependency, CurrentUserDependency
from ...models import User
from ...schemas import (
    AuthData,
    ChangePasswordRequest,
    Envelope,
    LoginRequest,
    ProfileUpdateRequest,
    RegisterRequest,
    UserData,
    UserPublic,
)
from ...services import AuthResult

router = APIRouter(prefix="/auth", tags=["auth"])


def _map_user(user: User) -> UserPublic:
    return UserPublic.model_validate(user)


def _auth_data(result: AuthResult) -> AuthData:
    return AuthData(
        user=_map_user(result.user),
        token=result.token.token,
        expires_at=result.token.expires_at,
    )


@router.post(
    "/register",
    response_model=Envelope[AuthData],
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user account",
)
async def register(payload: RegisterRequest, auth_service: AuthServiceDependency) -> Envelope[AuthData]:
    result = await auth_service.register(
        name=payload.name,
        email=payload.email,
        password=payload.password,
    )
    return Envelope[AuthData](message="User registered successfully", data=_auth_data(result))


@router.post(
    "/login",
    response_model=Envelope[AuthData],
    summary="Authenticate using email and password",
)
async def login(payload: LoginRequest, auth_service: AuthServiceDependency) -> Envelope[AuthData]:
    result = await auth_service.login(email=payload.email, password=payload.password)
    return Envelope[AuthData](message="Login successful", data=_auth_data(result))


@router.get(
    "/profile",
    response_model=Envelope[UserData],
    summary="Return the authenticated user's profile",
)
async def read_profile(
    current_user: CurrentUserDependency,
    auth_service: AuthServiceDependency,
) -> Envelope[UserData]:
    user = await auth_service.get_profile(current_user.id)
    return Envelope[UserData](data=UserData(user=_map_user(user)))


@router.put(
    "/profile",
    response_model=Envelope[UserData],
    summary="Update the authenticated user's name or email",
)
async def update_profile(
    payload: ProfileUpdateRequest,
    current_user: CurrentUserDependency,
    auth_service: AuthServiceDependency,
) -> Envelope[UserData]:
    user = await auth_service.update_profile(current_user.id, payload)
    return Envelope[UserData](message="Profile updated successfully", data=UserData(user=_map_user(user)))


@router.put(
    "/change-password",
    response_model=Envelope[None],
    summary="Change the authenticated user's password",
)
async def change_password(
    payload: ChangePasswordRequest,
    current_user: CurrentUserDependency,
    auth_service: AuthServiceDependency,
) -> Envelope[None]:
    await auth_service.change_password(
        current_user.id,
        current_password=payload.current_password,
        new_password=payload.new_password,
    )
    return Envelope[None](message="Password updated successfully")


@router.post(
    "/logout",
    response_model=Envelope[None],
    summary="Acknowledge a logout",
)
async def logout(current_user: CurrentUserDependency) -> Envelope[None]:
    # Tokens are stateless; the client discards its copy.
    return Envelope[None](message="Logged out successfully")
