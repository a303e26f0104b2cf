import logging
from typing import Annotated

from fastapi import Depends

from fitcoach.core.errors import NotFound
from fitcoach.infra.db import UserRepository, get_user_repository

from .models import ProfileUpdate, UserProfile

logger = logging.getLogger(__name__)


class ProfileService:
    """Reads and edits a user's own profile."""

    def __init__(self, users: UserRepository) -> None:
        self._users = users

    async def get_profile(self, user_id: str) -> UserProfile:
        user = await self._users.get(user_id)
        if user is None:
            raise NotFound(f"User {user_id} not found")
        return user

    async def update_profile(self, user_id: str, update: ProfileUpdate) -> UserProfile:
        changes = update.changes()
        if not changes:
            return await self.get_profile(user_id)
        user = await self._users.update(user_id, changes)
        if user is None:
            raise NotFound(f"User {user_id} not found")
        logger.info("User %s updated profile fields %s", user_id, sorted(changes))
        return user


def get_profile_service(
    users: Annotated[UserRepository, Depends(get_user_repository)],
) -> ProfileService:
    return ProfileService(users)
