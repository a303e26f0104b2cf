"""Value types for conversation context selection."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Literal

Sender = Literal["user", "ai"]

SENDER_USER: Sender = "user"
SENDER_AI: Sender = "ai"


@dataclass(frozen=True)
class ContextMessage:
    """One stored chat turn as seen by the context filter."""

    id: str
    content: str
    sender: Sender
    timestamp: datetime


class RequestType(str, Enum):
    """What kind of follow-up the user is asking for."""

    ANOTHER = "another"
    MODIFY = "modify"
    CLARIFY = "clarify"


@dataclass(frozen=True)
class Intent:
    """Heuristic reading of whether a message builds on the previous turn.

    ``request_type`` is ``None`` when no specific follow-up was detected.
    """

    references_previous: bool
    request_type: RequestType | None = None


NEUTRAL_INTENT = Intent(references_previous=False)


@dataclass(frozen=True)
class ScoredMessage:
    message: ContextMessage
    score: float
