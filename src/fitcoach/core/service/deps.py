"""FastAPI dependency factories for the chat service."""

from typing import Annotated

from fastapi import Depends
from langchain_core.language_models import BaseChatModel

from fitcoach.configs.config import get_context_config
from fitcoach.configs.system import ContextConfig
from fitcoach.core.llm.deps import get_llm
from fitcoach.infra.db import MessageRepository, get_message_repository

from .coach import CoachChatService


def get_chat_service(
    llm: Annotated[BaseChatModel, Depends(get_llm)],
    messages: Annotated[MessageRepository, Depends(get_message_repository)],
    context_config: Annotated[ContextConfig, Depends(get_context_config)],
) -> CoachChatService:
    return CoachChatService(llm, messages, context_config)
