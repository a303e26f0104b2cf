"""Configuration management using pydantic-settings.

**Not a singleton**: each call to ``get_app_config()`` re-reads config
from disk so that ConfigMap updates are picked up without restarting.

Priority order (highest first):

1. ConfigMap YAML (path from ``FITCOACH_CONFIGMAP_FILE`` env var)
2. Environment variables (``FITCOACH_`` prefix, ``__`` for nesting)
3. ``.env`` dotenv file
4. Static YAML (``configs/config.yaml``)
5. Init defaults / field defaults
6. File secrets

Values that admins change at runtime (API key, model, context size)
live in the ``system_settings`` table, not here.
"""

import os
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from .system import (
    AuthConfig,
    ChatConfig,
    ContextConfig,
    LLMConfig,
    LoggingConfig,
    StorageConfig,
    ThirdPartyConfig,
    TracingConfig,
)

CONFIG_PY_PATH = Path(__file__).resolve()
PROJECT_ROOT = CONFIG_PY_PATH.parent.parent.parent.parent
CONFIG_DIR = PROJECT_ROOT / "configs"

STATIC_CONFIG_FILE = CONFIG_DIR / "config.yaml"

_configmap_env = os.environ.get("FITCOACH_CONFIGMAP_FILE")
CONFIGMAP_CONFIG_FILE: Optional[Path] = Path(_configmap_env) if _configmap_env else None

DOTENV_FILE_PATH = PROJECT_ROOT / ".env"
ENV_DELIMITER = "__"
ENV_PREFIX = "FITCOACH_"

DEFAULT_ENCODING = "utf-8"


class AppConfig(BaseSettings):
    """Application configuration."""

    model_config = SettingsConfigDict(
        env_file=DOTENV_FILE_PATH,
        env_file_encoding=DEFAULT_ENCODING,
        env_nested_delimiter=ENV_DELIMITER,
        env_prefix=ENV_PREFIX,
        case_sensitive=False,
        extra="ignore",
        yaml_file=STATIC_CONFIG_FILE,
        yaml_file_encoding=DEFAULT_ENCODING,
    )

    third_party: ThirdPartyConfig = Field(
        default_factory=ThirdPartyConfig,
        description="Database and other third-party connections",
    )

    llm: LLMConfig = Field(
        default_factory=LLMConfig,
        description="Chat model client settings",
    )

    chat: ChatConfig = Field(
        default_factory=ChatConfig, description="Coach chat endpoint settings"
    )

    context: ContextConfig = Field(
        default_factory=ContextConfig,
        description="Conversation context selection constants",
    )

    auth: AuthConfig = Field(
        default_factory=AuthConfig, description="Accounts and sessions"
    )

    storage: StorageConfig = Field(
        default_factory=StorageConfig, description="Exported PDF storage"
    )

    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Root logger settings"
    )

    tracing: TracingConfig = Field(
        default_factory=TracingConfig, description="OpenTelemetry settings"
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        sources: list[PydanticBaseSettingsSource] = []

        if CONFIGMAP_CONFIG_FILE is not None and CONFIGMAP_CONFIG_FILE.is_file():
            sources.append(
                YamlConfigSettingsSource(
                    settings_cls,
                    yaml_file=CONFIGMAP_CONFIG_FILE,
                )
            )

        sources.append(env_settings)
        sources.append(dotenv_settings)
        sources.append(YamlConfigSettingsSource(settings_cls))
        sources.append(init_settings)
        sources.append(file_secret_settings)

        return tuple(sources)


def get_app_config() -> AppConfig:
    """Get the application configuration.

    Re-reads ``configs/config.yaml`` (and the ConfigMap override when
    present) on every call.
    """
    return AppConfig()


def get_llm_config() -> LLMConfig:
    return get_app_config().llm


def get_chat_config() -> ChatConfig:
    return get_app_config().chat


def get_context_config() -> ContextConfig:
    return get_app_config().context


def get_auth_config() -> AuthConfig:
    return get_app_config().auth


def get_storage_config() -> StorageConfig:
    return get_app_config().storage
