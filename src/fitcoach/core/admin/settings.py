"""Runtime settings edited by admins (API key, model, limits, branding)."""

import logging

from fitcoach.core.errors import NotFound
from fitcoach.infra.db.settings import SettingsRepository

from .models import PUBLIC_SETTINGS, SystemSetting

logger = logging.getLogger(__name__)


class SettingsService:
    def __init__(self, repository: SettingsRepository) -> None:
        self._repository = repository

    async def get_setting(self, key: str) -> str:
        """Return the value of *key*, or ``""`` when it is unset or unreadable."""
        try:
            value = await self._repository.get_value(key)
        except Exception:
            logger.warning("Failed to read setting %s", key, exc_info=True)
            return ""
        if value is None:
            logger.debug("Setting not found: %s", key)
            return ""
        return value

    async def get_int_setting(self, key: str, default: int) -> int:
        """Positive integer value of *key*; *default* when missing or invalid."""
        raw = (await self.get_setting(key)).strip()
        try:
            value = int(raw)
        except ValueError:
            return default
        return value if value > 0 else default

    async def list_settings(self) -> list[SystemSetting]:
        return await self._repository.list_all()

    async def update_setting(
        self, key: str, value: str, updated_by: str | None
    ) -> SystemSetting:
        setting = await self._repository.update(key, value, updated_by)
        if setting is None:
            raise NotFound(f"Unknown setting: {key}")
        logger.info("Setting %s updated by %s", key, updated_by)
        return setting

    async def public_settings(self) -> dict[str, str]:
        """Branding values that anonymous visitors may read."""
        try:
            values = await self._repository.get_values(PUBLIC_SETTINGS)
        except Exception:
            logger.warning("Failed to read public settings", exc_info=True)
            values = {}
        return {key: values.get(key, "") for key in PUBLIC_SETTINGS}
