"""User accounts and login sessions."""

import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from fitcoach.core.profile.models import UserProfile

from .models import AuthSession, User

logger = logging.getLogger(__name__)


def _to_profile(row: User) -> UserProfile:
    return UserProfile.model_validate(row)


class UserRepository:
    """CRUD over the ``users`` table, returning ``UserProfile`` records."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get(self, user_id: str) -> UserProfile | None:
        async with self._session_factory() as session:
            row = await session.get(User, user_id)
            return _to_profile(row) if row else None

    async def get_credentials(self, email: str) -> tuple[UserProfile, str] | None:
        """Return the profile and password hash for *email*, if registered."""
        async with self._session_factory() as session:
            row = await session.scalar(select(User).where(User.email == email))
            return (_to_profile(row), row.password_hash) if row else None

    async def exists_email(self, email: str) -> bool:
        async with self._session_factory() as session:
            found = await session.scalar(select(User.id).where(User.email == email))
            return found is not None

    async def create(self, profile: UserProfile, password_hash: str) -> UserProfile:
        row = User(
            **profile.model_dump(exclude={"created_at", "updated_at"}),
            password_hash=password_hash,
        )
        async with self._session_factory() as session:
            session.add(row)
            await session.commit()
            await session.refresh(row)
            return _to_profile(row)

    async def update(
        self, user_id: str, changes: Mapping[str, Any]
    ) -> UserProfile | None:
        async with self._session_factory() as session:
            row = await session.get(User, user_id)
            if row is None:
                return None
            for key, value in changes.items():
                setattr(row, key, value)
            await session.commit()
            await session.refresh(row)
            return _to_profile(row)

    async def delete(self, user_id: str) -> bool:
        async with self._session_factory() as session:
            result = await session.execute(delete(User).where(User.id == user_id))
            await session.commit()
            return result.rowcount > 0

    async def list_all(self) -> list[UserProfile]:
        """All users, newest first."""
        async with self._session_factory() as session:
            rows = await session.scalars(select(User).order_by(User.created_at.desc()))
            return [_to_profile(row) for row in rows]

    async def count(self) -> int:
        async with self._session_factory() as session:
            return await session.scalar(select(func.count()).select_from(User)) or 0


class SessionRepository:
    """Bearer tokens mapped to users, with an expiry."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def create(self, token: str, user_id: str, expires_at: datetime) -> None:
        async with self._session_factory() as session:
            session.add(AuthSession(token=token, user_id=user_id, expires_at=expires_at))
            await session.commit()

    async def get_user_id(self, token: str, now: datetime | None = None) -> str | None:
        """Return the owner of *token* unless it is unknown or expired."""
        now = now or datetime.now(timezone.utc)
        async with self._session_factory() as session:
            return await session.scalar(
                select(AuthSession.user_id).where(
                    AuthSession.token == token, AuthSession.expires_at > now
                )
            )

    async def delete(self, token: str) -> None:
        async with self._session_factory() as session:
            await session.execute(delete(AuthSession).where(AuthSession.token == token))
            await session.commit()

    async def purge_expired(self, now: datetime | None = None) -> int:
        now = now or datetime.now(timezone.utc)
        async with self._session_factory() as session:
            result = await session.execute(
                delete(AuthSession).where(AuthSession.expires_at <= now)
            )
            await session.commit()
        if result.rowcount:
            logger.info("Purged %d expired sessions", result.rowcount)
        return result.rowcount
