"""User administration and usage statistics."""

import logging
from datetime import datetime, timedelta, timezone

from fitcoach.core.errors import NotFound
from fitcoach.core.profile.models import AdminUserUpdate, UserProfile
from fitcoach.infra.db.messages import MessageRepository
from fitcoach.infra.db.users import UserRepository

from .models import UserStats

logger = logging.getLogger(__name__)

ACTIVE_USER_WINDOW = timedelta(days=7)


class AdminService:
    def __init__(self, users: UserRepository, messages: MessageRepository) -> None:
        self._users = users
        self._messages = messages

    async def list_users(self) -> list[UserProfile]:
        return await self._users.list_all()

    async def update_user(
        self, user_id: str, update: AdminUserUpdate, admin_id: str
    ) -> UserProfile:
        user = await self._users.update(user_id, update.changes())
        if user is None:
            raise NotFound(f"User {user_id} not found")
        logger.info("Admin %s updated user %s", admin_id, user_id)
        return user

    async def delete_user(self, user_id: str, admin_id: str) -> None:
        if not await self._users.delete(user_id):
            raise NotFound(f"User {user_id} not found")
        logger.info("Admin %s deleted user %s", admin_id, user_id)

    async def stats(self, now: datetime | None = None) -> UserStats:
        now = now or datetime.now(timezone.utc)
        total_users = await self._users.count()
        total_messages = await self._messages.count()
        active_users = await self._messages.count_active_users(
            now - ACTIVE_USER_WINDOW
        )
        average = round(total_messages / total_users) if total_users else 0
        return UserStats(
            total_users=total_users,
            active_users=active_users,
            total_messages=total_messages,
            average_messages_per_user=average,
        )
