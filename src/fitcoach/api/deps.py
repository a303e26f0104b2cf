"""Centralized FastAPI dependency type aliases.

Route modules import these ``*Dep`` aliases instead of spelling out
``Annotated[T, Depends(get_xxx)]``.  Each alias maps to one ``get_*``
factory that tests can replace through ``app.dependency_overrides``.
"""

from typing import Annotated

from fastapi import Depends

from fitcoach.configs.config import (
    get_chat_config,
    get_context_config,
)
from fitcoach.configs.system import ChatConfig, ContextConfig
from fitcoach.core.admin.deps import get_admin_service, get_settings_service
from fitcoach.core.admin.service import AdminService
from fitcoach.core.admin.settings import SettingsService
from fitcoach.core.auth.deps import (
    get_auth_service,
    get_bearer_token,
    get_current_user,
    require_admin,
)
from fitcoach.core.auth.service import AuthService
from fitcoach.core.profile.models import UserProfile
from fitcoach.core.profile.service import ProfileService, get_profile_service
from fitcoach.core.programs.customizer import ProgramCustomizer
from fitcoach.core.programs.deps import get_program_customizer, get_program_service
from fitcoach.core.programs.service import ProgramService
from fitcoach.core.service.coach import CoachChatService
from fitcoach.core.service.deps import get_chat_service
from fitcoach.infra.db import MessageRepository, get_message_repository

ChatConfigDep = Annotated[ChatConfig, Depends(get_chat_config)]
ContextConfigDep = Annotated[ContextConfig, Depends(get_context_config)]

AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
BearerTokenDep = Annotated[str, Depends(get_bearer_token)]
CurrentUserDep = Annotated[UserProfile, Depends(get_current_user)]
AdminUserDep = Annotated[UserProfile, Depends(require_admin)]

ProfileServiceDep = Annotated[ProfileService, Depends(get_profile_service)]
ChatServiceDep = Annotated[CoachChatService, Depends(get_chat_service)]
MessageRepositoryDep = Annotated[MessageRepository, Depends(get_message_repository)]
ProgramServiceDep = Annotated[ProgramService, Depends(get_program_service)]
ProgramCustomizerDep = Annotated[ProgramCustomizer, Depends(get_program_customizer)]
SettingsServiceDep = Annotated[SettingsService, Depends(get_settings_service)]
AdminServiceDep = Annotated[AdminService, Depends(get_admin_service)]
