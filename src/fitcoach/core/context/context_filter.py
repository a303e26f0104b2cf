"""Select which past chat turns are sent to the LLM with a new message.

Every message is scored against the outgoing text and the score is
multiplied by three factors:

- a recency boost for the last few messages (larger when the message
  is within minutes of the newest one),
- a boost for messages in the current conversation (the run of
  messages since the last gap longer than ``conversation_break``),
- exponential decay by the hours elapsed before the newest message.

Messages scoring above ``similarity_threshold`` are ranked, capped at
``max_context_messages`` and returned in chronological order.
"""

import logging
import math
from collections.abc import Sequence
from datetime import datetime

from fitcoach.configs.system import ContextConfig

from .intent import analyze_intent
from .models import SENDER_AI, SENDER_USER, ContextMessage, ScoredMessage
from .relevance import calculate_relevance_score

logger = logging.getLogger(__name__)

_SECONDS_PER_HOUR = 3600.0

DEFAULT_CONTEXT_CONFIG = ContextConfig()


def _last_by_sender(
    messages: Sequence[ContextMessage], sender: str
) -> ContextMessage | None:
    for message in reversed(messages):
        if message.sender == sender:
            return message
    return None


def find_conversation_breaks(
    messages: Sequence[ContextMessage], config: ContextConfig = DEFAULT_CONTEXT_CONFIG
) -> list[int]:
    """Indices of messages that follow a gap longer than the break interval."""
    return [
        i
        for i in range(1, len(messages))
        if messages[i].timestamp - messages[i - 1].timestamp
        > config.conversation_break
    ]


def current_conversation_ids(
    messages: Sequence[ContextMessage], config: ContextConfig = DEFAULT_CONTEXT_CONFIG
) -> set[str]:
    breaks = find_conversation_breaks(messages, config)
    start = breaks[-1] if breaks else 0
    return {message.id for message in messages[start:]}


def _final_score(
    relevance: float,
    message: ContextMessage,
    last_timestamp: datetime,
    is_recent: bool,
    in_current_conversation: bool,
    config: ContextConfig,
) -> float:
    elapsed = last_timestamp - message.timestamp
    score = relevance

    if is_recent:
        if elapsed < config.very_recent_threshold:
            score *= config.very_recent_boost
        else:
            score *= config.recent_boost

    if in_current_conversation:
        score *= config.conversation_boost

    hours = elapsed.total_seconds() / _SECONDS_PER_HOUR
    return score * math.exp(-hours / config.decay_hours)


def rank_messages(
    messages: Sequence[ContextMessage],
    current_message: str,
    config: ContextConfig = DEFAULT_CONTEXT_CONFIG,
) -> list[ScoredMessage]:
    """Score every message and keep those above the threshold.

    The result keeps the input order; see ``filter_relevant_context``
    for ranking and capping.
    """
    if not messages:
        return []

    last_user = _last_by_sender(messages, SENDER_USER)
    last_ai = _last_by_sender(messages, SENDER_AI)
    intent = analyze_intent(
        current_message,
        last_user.content if last_user else None,
        last_ai.content if last_ai else None,
    )

    conversation = current_conversation_ids(messages, config)
    last_timestamp = messages[-1].timestamp
    first_recent = len(messages) - config.recent_window

    scored: list[ScoredMessage] = []
    for index, message in enumerate(messages):
        relevance = calculate_relevance_score(message.content, current_message, intent)
        score = _final_score(
            relevance,
            message,
            last_timestamp,
            is_recent=index >= first_recent,
            in_current_conversation=message.id in conversation,
            config=config,
        )
        if score > config.similarity_threshold:
            scored.append(ScoredMessage(message=message, score=score))
    return scored


def filter_relevant_context(
    messages: Sequence[ContextMessage],
    current_message: str,
    max_context_messages: int,
    config: ContextConfig = DEFAULT_CONTEXT_CONFIG,
) -> list[ContextMessage]:
    """Return the chronologically ordered context for *current_message*.

    An empty list is a valid answer: the caller then sends the message
    without history.
    """
    if not messages:
        return []

    logger.debug(
        "Filtering context: %d messages, max %d",
        len(messages),
        max_context_messages,
    )

    ranked = rank_messages(messages, current_message, config)
    top = sorted(ranked, key=lambda s: s.score, reverse=True)[
        : max(max_context_messages, 0)
    ]

    if top:
        logger.debug(
            "Context filtered: %d relevant, average score %.3f",
            len(top),
            sum(s.score for s in top) / len(top),
        )

    top.sort(key=lambda s: s.message.timestamp)
    return [s.message for s in top]
