"""Admin-editable key/value settings (``system_settings`` table)."""

from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from fitcoach.core.admin.models import SystemSetting as SystemSettingRecord

from .models import SystemSetting


class SettingsRepository:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def list_all(self) -> list[SystemSettingRecord]:
        async with self._session_factory() as session:
            rows = await session.scalars(select(SystemSetting).order_by(SystemSetting.key))
            return [SystemSettingRecord.model_validate(row) for row in rows]

    async def get_value(self, key: str) -> str | None:
        async with self._session_factory() as session:
            return await session.scalar(
                select(SystemSetting.value).where(SystemSetting.key == key)
            )

    async def get_values(self, keys: tuple[str, ...]) -> dict[str, str]:
        async with self._session_factory() as session:
            rows = await session.execute(
                select(SystemSetting.key, SystemSetting.value).where(
                    SystemSetting.key.in_(keys)
                )
            )
            return {row.key: row.value for row in rows}

    async def update(
        self, key: str, value: str, updated_by: str | None
    ) -> SystemSettingRecord | None:
        """Change an existing setting; unknown keys return ``None``."""
        async with self._session_factory() as session:
            row = await session.get(SystemSetting, key)
            if row is None:
                return None
            row.value = value
            row.updated_by = updated_by
            row.updated_at = datetime.now(timezone.utc)
            await session.commit()
            return SystemSettingRecord.model_validate(row)
