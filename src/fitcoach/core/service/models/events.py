"""Domain stream events emitted by the coach chat service."""

from typing import Literal

from pydantic import BaseModel, Field

EVENT_TYPE_STARTED = "started"
EVENT_TYPE_CONTENT = "content"
EVENT_TYPE_ERROR = "error"


class StartedEvent(BaseModel):
    """The user message is stored and the model call is starting."""

    type: Literal["started"] = "started"
    message_id: str = Field(description="ID of the AI message being written")
    context_size: int = Field(
        description="Number of past messages sent to the model as context"
    )


class ContentEvent(BaseModel):
    """Streamed text tokens of the coach reply."""

    type: Literal["content"] = "content"
    content: str = Field(description="Text token content")
    message_id: str | None = Field(
        default=None, description="ID of the AI message being written"
    )


class ErrorEvent(BaseModel):
    """Stream-level error event."""

    type: Literal["error"] = "error"
    message: str = Field(description="Error message")
    code: str | None = Field(default=None, description="Error code")


StreamEvent = StartedEvent | ContentEvent | ErrorEvent
