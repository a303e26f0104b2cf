"""Per-request repository factories.

Each repository wraps the session factory created by ``build_db``;
tests swap them out through ``app.dependency_overrides``.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from fitcoach.infra.db_engine import get_session_factory

from .messages import MessageRepository
from .programs import ProgramRepository, UserProgramRepository
from .settings import SettingsRepository
from .users import SessionRepository, UserRepository

SessionFactory = Annotated[
    async_sessionmaker[AsyncSession], Depends(get_session_factory)
]


def get_user_repository(sf: SessionFactory) -> UserRepository:
    return UserRepository(sf)


def get_session_repository(sf: SessionFactory) -> SessionRepository:
    return SessionRepository(sf)


def get_message_repository(sf: SessionFactory) -> MessageRepository:
    return MessageRepository(sf)


def get_program_repository(sf: SessionFactory) -> ProgramRepository:
    return ProgramRepository(sf)


def get_user_program_repository(sf: SessionFactory) -> UserProgramRepository:
    return UserProgramRepository(sf)


def get_settings_repository(sf: SessionFactory) -> SettingsRepository:
    return SettingsRepository(sf)
