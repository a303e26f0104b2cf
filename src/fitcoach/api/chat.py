"""Coach chat endpoints."""

from fastapi import APIRouter, status
from fastapi.responses import StreamingResponse

from fitcoach.core.admin.models import SETTING_MAX_CONTEXT_MESSAGES
from fitcoach.core.errors import InvalidInput
from fitcoach.core.service.models import ChatContext

from .deps import (
    ChatConfigDep,
    ChatServiceDep,
    ContextConfigDep,
    CurrentUserDep,
    MessageRepositoryDep,
    SettingsServiceDep,
)
from .models import ChatMessageOut, ChatRequest
from .streaming import SSE_HEADERS, SSE_MEDIA_TYPE, sse_stream

router = APIRouter(prefix="/api/v1/chat", tags=["chat"])


@router.get("/messages")
async def list_messages(
    user: CurrentUserDep, messages: MessageRepositoryDep
) -> list[ChatMessageOut]:
    return [ChatMessageOut.from_message(m) for m in await messages.list_for_user(user.id)]


@router.delete("/messages", status_code=status.HTTP_204_NO_CONTENT)
async def clear_messages(user: CurrentUserDep, messages: MessageRepositoryDep) -> None:
    await messages.clear_for_user(user.id)


@router.post("")
async def chat(
    body: ChatRequest,
    user: CurrentUserDep,
    service: ChatServiceDep,
    messages: MessageRepositoryDep,
    settings: SettingsServiceDep,
    chat_config: ChatConfigDep,
    context_config: ContextConfigDep,
) -> StreamingResponse:
    """Send a message to the coach and stream the reply as SSE.

    Events are JSON objects with a ``type`` of ``started`` (the stored
    AI message id and how many past messages were used as context),
    ``content`` (reply tokens) or ``error``.
    """
    if len(body.query) > chat_config.max_query_length:
        raise InvalidInput(
            f"Message is too long (max {chat_config.max_query_length} characters)"
        )

    ctx = ChatContext(
        user=user,
        query=body.query,
        max_context_messages=await settings.get_int_setting(
            SETTING_MAX_CONTEXT_MESSAGES, context_config.max_messages
        ),
        history=await messages.load_history(user.id),
    )
    return StreamingResponse(
        sse_stream(
            service.stream_reply(ctx),
            request_timeout=chat_config.request_timeout,
            service_name=service.chat_service_name,
            send_traceback=chat_config.send_traceback,
        ),
        media_type=SSE_MEDIA_TYPE,
        headers=SSE_HEADERS,
    )
