"""Authentication dependencies: the current user and the admin guard."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from fitcoach.configs.config import get_auth_config
from fitcoach.configs.system import AuthConfig
from fitcoach.core.errors import AuthenticationFailed, PermissionDenied
from fitcoach.core.profile.models import UserProfile
from fitcoach.infra.db import (
    SessionRepository,
    UserRepository,
    get_session_repository,
    get_user_repository,
)

from .service import AuthService

bearer_scheme = HTTPBearer(auto_error=False)


def get_auth_service(
    users: Annotated[UserRepository, Depends(get_user_repository)],
    sessions: Annotated[SessionRepository, Depends(get_session_repository)],
    config: Annotated[AuthConfig, Depends(get_auth_config)],
) -> AuthService:
    return AuthService(users, sessions, config)


def get_bearer_token(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ],
) -> str:
    if credentials is None or not credentials.credentials:
        raise AuthenticationFailed("Not authenticated")
    return credentials.credentials


async def get_current_user(
    token: Annotated[str, Depends(get_bearer_token)],
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> UserProfile:
    return await auth.authenticate(token)


async def require_admin(
    user: Annotated[UserProfile, Depends(get_current_user)],
) -> UserProfile:
    if not user.is_admin:
        raise PermissionDenied("Admin access required")
    return user
