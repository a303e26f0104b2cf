"""Chat context: per-request data passed to the chat service."""

from dataclasses import dataclass, field

from fitcoach.core.context.models import ContextMessage
from fitcoach.core.profile.models import UserProfile


@dataclass
class ChatContext:
    """Everything one coach reply needs, loaded by the endpoint.

    ``history`` is read before the new message is stored, oldest first.
    """

    user: UserProfile
    query: str
    max_context_messages: int
    history: list[ContextMessage] = field(default_factory=list)
