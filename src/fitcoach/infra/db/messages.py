"""Chat message persistence.

``load_history`` is what the chat endpoint uses to build context: it
never raises, since a reply without history beats no reply.  The other
reads and all writes propagate database errors.
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import delete, distinct, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from fitcoach.core.context.models import ContextMessage, Sender
from fitcoach.infra.id_utils import PREFIX_MESSAGE, generate_id
from fitcoach.infra.telemetry import (
    ATTR_HISTORY_MESSAGE_COUNT,
    ATTR_HISTORY_USER_ID,
    SPAN_HISTORY_LOAD,
    tracer,
)

from .models import ChatMessage

logger = logging.getLogger(__name__)


def _to_message(row: ChatMessage) -> ContextMessage:
    return ContextMessage(
        id=row.id,
        content=row.content,
        sender=row.sender,  # type: ignore[arg-type]
        timestamp=row.created_at,
    )


class MessageRepository:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def list_for_user(self, user_id: str) -> list[ContextMessage]:
        """All messages of *user_id*, oldest first."""
        async with self._session_factory() as session:
            rows = await session.scalars(
                select(ChatMessage)
                .where(ChatMessage.user_id == user_id)
                .order_by(ChatMessage.created_at, ChatMessage.id)
            )
            return [_to_message(row) for row in rows]

    async def load_history(self, user_id: str) -> list[ContextMessage]:
        """Like ``list_for_user`` but degrades to ``[]`` on failure."""
        with tracer.start_as_current_span(SPAN_HISTORY_LOAD) as span:
            span.set_attribute(ATTR_HISTORY_USER_ID, user_id)
            try:
                messages = await self.list_for_user(user_id)
            except Exception:
                logger.warning(
                    "Failed to load chat history for %s", user_id, exc_info=True
                )
                return []
            span.set_attribute(ATTR_HISTORY_MESSAGE_COUNT, len(messages))
            logger.debug("Loaded %d messages for user %s", len(messages), user_id)
            return messages

    async def add(self, user_id: str, content: str, sender: Sender) -> ContextMessage:
        row = ChatMessage(
            id=generate_id(PREFIX_MESSAGE),
            user_id=user_id,
            content=content,
            sender=sender,
            created_at=datetime.now(timezone.utc),
        )
        async with self._session_factory() as session:
            session.add(row)
            await session.commit()
        return _to_message(row)

    async def update_content(self, message_id: str, content: str) -> None:
        async with self._session_factory() as session:
            await session.execute(
                update(ChatMessage)
                .where(ChatMessage.id == message_id)
                .values(content=content)
            )
            await session.commit()

    async def delete(self, message_id: str) -> None:
        async with self._session_factory() as session:
            await session.execute(delete(ChatMessage).where(ChatMessage.id == message_id))
            await session.commit()

    async def clear_for_user(self, user_id: str) -> int:
        async with self._session_factory() as session:
            result = await session.execute(
                delete(ChatMessage).where(ChatMessage.user_id == user_id)
            )
            await session.commit()
            return result.rowcount

    async def count(self) -> int:
        async with self._session_factory() as session:
            return (
                await session.scalar(select(func.count()).select_from(ChatMessage))
                or 0
            )

    async def count_active_users(self, since: datetime) -> int:
        """Distinct users who sent a message at or after *since*."""
        async with self._session_factory() as session:
            return (
                await session.scalar(
                    select(func.count(distinct(ChatMessage.user_id))).where(
                        ChatMessage.created_at >= since,
                        ChatMessage.sender == "user",
                    )
                )
                or 0
            )
