"""Signup, login and bearer-session handling."""

import logging
import re
from datetime import datetime, timezone

from fitcoach.configs.system import AuthConfig
from fitcoach.core.errors import AuthenticationFailed, Conflict, InvalidInput
from fitcoach.core.profile.models import (
    DEFAULT_AGE,
    DEFAULT_EXPERIENCE,
    DEFAULT_HEIGHT,
    DEFAULT_SEX,
    DEFAULT_UNIT_SYSTEM,
    DEFAULT_WEIGHT,
    UserProfile,
)
from fitcoach.infra.db.users import SessionRepository, UserRepository
from fitcoach.infra.id_utils import PREFIX_USER, generate_id, generate_session_token

from .passwords import hash_password, verify_password

logger = logging.getLogger(__name__)

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

INVALID_CREDENTIALS = "Invalid email or password"


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AuthService:
    def __init__(
        self,
        users: UserRepository,
        sessions: SessionRepository,
        config: AuthConfig,
    ) -> None:
        self._users = users
        self._sessions = sessions
        self._config = config

    async def signup(
        self, email: str, password: str, name: str
    ) -> tuple[UserProfile, str]:
        """Create an account with default profile values and log it in."""
        email = normalize_email(email)
        name = name.strip()
        if not _EMAIL_RE.match(email):
            raise InvalidInput("Invalid email address")
        if not name:
            raise InvalidInput("Name is required")
        if len(password) < self._config.password_min_length:
            raise InvalidInput(
                f"Password must be at least {self._config.password_min_length} "
                "characters"
            )
        if await self._users.exists_email(email):
            raise Conflict("An account with this email already exists")

        profile = UserProfile(
            id=generate_id(PREFIX_USER),
            email=email,
            name=name,
            age=DEFAULT_AGE,
            weight=DEFAULT_WEIGHT,
            height=DEFAULT_HEIGHT,
            sex=DEFAULT_SEX,
            fitness_goals=[],
            experience_level=DEFAULT_EXPERIENCE,
            unit_system=DEFAULT_UNIT_SYSTEM,
            is_admin=email in {normalize_email(e) for e in self._config.admin_emails},
        )
        user = await self._users.create(
            profile, hash_password(password, self._config.pbkdf2_iterations)
        )
        logger.info("User %s signed up (admin=%s)", user.id, user.is_admin)
        return user, await self._open_session(user.id)

    async def login(self, email: str, password: str) -> tuple[UserProfile, str]:
        found = await self._users.get_credentials(normalize_email(email))
        if found is None or not verify_password(password, found[1]):
            raise AuthenticationFailed(INVALID_CREDENTIALS)
        user = found[0]
        logger.info("User %s logged in", user.id)
        return user, await self._open_session(user.id)

    async def logout(self, token: str) -> None:
        await self._sessions.delete(token)

    async def authenticate(self, token: str) -> UserProfile:
        """Resolve a bearer token to its user; unknown or expired tokens fail."""
        user_id = await self._sessions.get_user_id(token)
        if user_id is None:
            raise AuthenticationFailed("Session expired or invalid")
        user = await self._users.get(user_id)
        if user is None:
            raise AuthenticationFailed("Session expired or invalid")
        return user

    async def _open_session(self, user_id: str) -> str:
        token = generate_session_token()
        expires_at = datetime.now(timezone.utc) + self._config.session_ttl
        await self._sessions.create(token, user_id, expires_at)
        return token
