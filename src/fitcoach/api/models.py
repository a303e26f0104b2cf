"""Request/response schemas and SSE formatting for the HTTP API."""

from traceback import format_exception

from pydantic import BaseModel, Field

from fitcoach.core.context.models import ContextMessage, Sender
from fitcoach.core.profile.models import UserProfile
from fitcoach.core.service.models import ErrorEvent, StreamEvent

# ---------------------------------------------------------------------------
# SSE
# ---------------------------------------------------------------------------


def format_sse(event: StreamEvent) -> str:
    return f"data: {event.model_dump_json()}\n\n"


def format_error_sse(exc: BaseException, *, send_traceback: bool = False) -> str:
    message = (
        "An error occurred during processing: "
        + "".join(format_exception(type(exc), exc, exc.__traceback__))
        if send_traceback
        else "An error occurred during processing."
    )
    return format_sse(ErrorEvent(message=message, code="PROCESSING_ERROR"))


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


class SignupRequest(BaseModel):
    email: str = Field(description="Login e-mail")
    password: str = Field(description="Plain-text password")
    name: str = Field(description="Display name")


class LoginRequest(BaseModel):
    email: str
    password: str


class SessionResponse(BaseModel):
    token: str = Field(description="Bearer token for the Authorization header")
    user: UserProfile


# ---------------------------------------------------------------------------
# Chat
# ---------------------------------------------------------------------------


class ChatRequest(BaseModel):
    query: str = Field(min_length=1, description="The user's message")


class ChatMessageOut(BaseModel):
    id: str
    content: str
    sender: Sender
    timestamp: str

    @classmethod
    def from_message(cls, message: ContextMessage) -> "ChatMessageOut":
        return cls(
            id=message.id,
            content=message.content,
            sender=message.sender,
            timestamp=message.timestamp.isoformat(),
        )


# ---------------------------------------------------------------------------
# Programs
# ---------------------------------------------------------------------------


class SaveProgramRequest(BaseModel):
    program_id: str
    customized_plan: str = Field(min_length=1)


class UpdateProgramRequest(BaseModel):
    customized_plan: str = Field(min_length=1)


class CustomizeResponse(BaseModel):
    program_id: str
    customized_plan: str


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


class SettingUpdateRequest(BaseModel):
    value: str
