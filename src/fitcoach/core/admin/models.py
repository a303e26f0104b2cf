from datetime import datetime

from pydantic import BaseModel, ConfigDict

# Keys of the seeded system_settings rows.
SETTING_OPENAI_API_KEY = "openai_api_key"
SETTING_OPENAI_MODEL = "openai_model"
SETTING_MAX_CONTEXT_MESSAGES = "max_context_messages"
SETTING_MAX_RESPONSE_LENGTH = "max_response_length"
SETTING_AI_DISCLAIMER = "ai_disclaimer"
SETTING_APP_TITLE = "app_title"
SETTING_APP_LOGO_URL = "app_logo_url"

PUBLIC_SETTINGS = (SETTING_APP_TITLE, SETTING_APP_LOGO_URL, SETTING_AI_DISCLAIMER)


class SystemSetting(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    key: str
    value: str
    description: str = ""
    updated_at: datetime | None = None
    updated_by: str | None = None


class UserStats(BaseModel):
    total_users: int
    active_users: int
    total_messages: int
    average_messages_per_user: int
