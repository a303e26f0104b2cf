"""Chat model factory.

Admins can set the API key, the model and the reply length at runtime
through system settings; those win over the static ``LLMConfig``.
"""

import logging
from typing import Annotated

from fastapi import Depends
from langchain_core.language_models import BaseChatModel
from langchain_openai import ChatOpenAI

from fitcoach.configs.config import get_llm_config
from fitcoach.configs.system import LLMConfig
from fitcoach.core.admin.deps import get_settings_service
from fitcoach.core.admin.models import (
    SETTING_MAX_RESPONSE_LENGTH,
    SETTING_OPENAI_API_KEY,
    SETTING_OPENAI_MODEL,
)
from fitcoach.core.admin.settings import SettingsService
from fitcoach.core.errors import LLMNotConfigured

logger = logging.getLogger(__name__)


def build_chat_model(
    config: LLMConfig, *, api_key: str, model_name: str, max_tokens: int
) -> ChatOpenAI:
    """Create a streaming ``ChatOpenAI`` client."""
    return ChatOpenAI(
        base_url=config.endpoint,
        api_key=api_key,
        model=model_name,
        temperature=config.temperature,
        max_tokens=max_tokens,
        timeout=config.model_timeout.total_seconds(),
        top_p=config.top_p,
        max_retries=config.max_retries,
        streaming=True,
    )


async def get_llm(
    config: Annotated[LLMConfig, Depends(get_llm_config)],
    settings: Annotated[SettingsService, Depends(get_settings_service)],
) -> BaseChatModel:
    api_key = (await settings.get_setting(SETTING_OPENAI_API_KEY)).strip()
    model_name = (await settings.get_setting(SETTING_OPENAI_MODEL)).strip()
    api_key = api_key or config.api_key
    model_name = model_name or config.model_name

    if not api_key:
        raise LLMNotConfigured(
            "OpenAI API key is not configured. "
            "Please configure it in the admin settings."
        )
    if not model_name:
        raise LLMNotConfigured(
            "OpenAI model is not configured. "
            "Please configure it in the admin settings."
        )

    max_tokens = await settings.get_int_setting(
        SETTING_MAX_RESPONSE_LENGTH, config.max_tokens
    )
    logger.debug("Using chat model %s (max_tokens=%d)", model_name, max_tokens)
    return build_chat_model(
        config, api_key=api_key, model_name=model_name, max_tokens=max_tokens
    )
