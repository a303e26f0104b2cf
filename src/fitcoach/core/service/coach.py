"""AI coach chat: context selection, persistence and token streaming."""

import logging
from collections.abc import AsyncGenerator, Sequence

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from fitcoach.configs.system import ContextConfig
from fitcoach.core.context import filter_relevant_context
from fitcoach.core.context.models import SENDER_AI, SENDER_USER, ContextMessage
from fitcoach.infra.db.messages import MessageRepository
from fitcoach.infra.telemetry import (
    ATTR_CONTEXT_CANDIDATES,
    ATTR_CONTEXT_LIMIT,
    ATTR_CONTEXT_SELECTED,
    SPAN_CONTEXT_SELECT,
    tracer,
)

from .metrics import CONTEXT_MESSAGES_SELECTED
from .models import ChatContext, ContentEvent, StartedEvent, StreamEvent
from .prompt import build_system_prompt

logger = logging.getLogger(__name__)


def to_langchain_messages(messages: Sequence[ContextMessage]) -> list[BaseMessage]:
    return [
        HumanMessage(content=m.content)
        if m.sender == SENDER_USER
        else AIMessage(content=m.content)
        for m in messages
    ]


class CoachChatService:
    """Streams a coach reply for one user message."""

    chat_service_name = "coach"

    def __init__(
        self,
        llm: BaseChatModel,
        messages: MessageRepository,
        context_config: ContextConfig,
    ) -> None:
        self._llm = llm
        self._messages = messages
        self._context_config = context_config

    def select_context(self, ctx: ChatContext) -> list[ContextMessage]:
        with tracer.start_as_current_span(SPAN_CONTEXT_SELECT) as span:
            span.set_attribute(ATTR_CONTEXT_CANDIDATES, len(ctx.history))
            span.set_attribute(ATTR_CONTEXT_LIMIT, ctx.max_context_messages)
            # Empty AI rows are placeholders of replies that never finished.
            candidates = [m for m in ctx.history if m.content]
            selected = filter_relevant_context(
                candidates,
                ctx.query,
                ctx.max_context_messages,
                self._context_config,
            )
            span.set_attribute(ATTR_CONTEXT_SELECTED, len(selected))
        CONTEXT_MESSAGES_SELECTED.observe(len(selected))
        return selected

    def build_prompt(
        self, ctx: ChatContext, context: Sequence[ContextMessage]
    ) -> list[BaseMessage]:
        return [
            SystemMessage(content=build_system_prompt(ctx.user)),
            *to_langchain_messages(context),
            HumanMessage(content=ctx.query),
        ]

    async def stream_reply(
        self, ctx: ChatContext
    ) -> AsyncGenerator[StreamEvent, None]:
        """Store the user message, stream the reply and store it too.

        The AI message is inserted empty before the model is called and
        filled in on completion.  If the stream fails or is cancelled the
        placeholder is removed and the exception propagates.
        """
        context = self.select_context(ctx)
        prompt = self.build_prompt(ctx, context)

        await self._messages.add(ctx.user.id, ctx.query, SENDER_USER)
        placeholder = await self._messages.add(ctx.user.id, "", SENDER_AI)
        yield StartedEvent(message_id=placeholder.id, context_size=len(context))

        parts: list[str] = []
        completed = False
        try:
            async for chunk in self._llm.astream(prompt):
                if isinstance(chunk.content, str) and chunk.content:
                    parts.append(chunk.content)
                    yield ContentEvent(content=chunk.content, message_id=placeholder.id)
            completed = True
        finally:
            if not completed:
                logger.info(
                    "Reply %s for user %s did not complete; removing placeholder",
                    placeholder.id,
                    ctx.user.id,
                )
                await self._messages.delete(placeholder.id)

        reply = "".join(parts)
        await self._messages.update_content(placeholder.id, reply)
        logger.debug(
            "Stored reply %s (%d chars, %d context messages)",
            placeholder.id,
            len(reply),
            len(context),
        )
