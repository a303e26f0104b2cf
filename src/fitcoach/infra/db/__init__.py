"""Async PostgreSQL infrastructure (ORM models, repositories, dependencies)."""

from .deps import (get_message_repository, get_program_repository,
                   get_session_repository, get_settings_repository,
                   get_user_program_repository, get_user_repository)
from .messages import MessageRepository
from .models import (AuthSession, Base, ChatMessage, Program, SystemSetting,
                     User, UserProgram)
from .programs import ProgramRepository, UserProgramRepository
from .settings import SettingsRepository
from .users import SessionRepository, UserRepository

from fitcoach.infra.db_engine import build_db, get_session_factory

__all__ = [
    "AuthSession",
    "Base",
    "build_db",
    "ChatMessage",
    "get_message_repository",
    "get_program_repository",
    "get_session_factory",
    "get_session_repository",
    "get_settings_repository",
    "get_user_program_repository",
    "get_user_repository",
    "MessageRepository",
    "Program",
    "ProgramRepository",
    "SessionRepository",
    "SettingsRepository",
    "SystemSetting",
    "User",
    "UserProgram",
    "UserProgramRepository",
    "UserRepository",
]
