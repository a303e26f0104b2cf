from typing import Annotated

from fastapi import Depends

from fitcoach.infra.db import (
    MessageRepository,
    SettingsRepository,
    UserRepository,
    get_message_repository,
    get_settings_repository,
    get_user_repository,
)

from .service import AdminService
from .settings import SettingsService


def get_settings_service(
    repository: Annotated[SettingsRepository, Depends(get_settings_repository)],
) -> SettingsService:
    return SettingsService(repository)


def get_admin_service(
    users: Annotated[UserRepository, Depends(get_user_repository)],
    messages: Annotated[MessageRepository, Depends(get_message_repository)],
) -> AdminService:
    return AdminService(users, messages)
