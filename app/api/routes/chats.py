"""Chat and message endpoints."""

import logging
from uuid import UUID

from fastapi import APIRouter, Query, status

from app.api.deps import AggregationService, Store
from app.core.exceptions import InvalidInputError, NotFoundError
from app.schemas.chat import ChatDetail, ChatSummary, MessageCreate, MessageResponse

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/chats", response_model=list[ChatSummary])
async def list_chats(
    service: AggregationService,
    user_id: UUID | None = Query(None, alias="userId"),
) -> list[ChatSummary]:
    """List the chats of a user with display names and latest messages."""
    if user_id is None:
        raise InvalidInputError("User ID is required")

    return await service.list_chats_for_user(user_id)


@router.get("/chats/{chat_id}", response_model=ChatDetail)
async def get_chat(chat_id: UUID, store: Store) -> ChatDetail:
    """Get a chat with its participants."""
    chat = await store.get_chat(chat_id)
    if chat is None:
        raise NotFoundError("Chat not found")

    return ChatDetail.model_validate(chat)


@router.get("/chats/{chat_id}/messages", response_model=list[MessageResponse])
async def list_messages(chat_id: UUID, store: Store) -> list[MessageResponse]:
    """List the messages of a chat, oldest first."""
    messages = await store.list_messages(chat_id)
    return [MessageResponse.model_validate(m) for m in messages]


@router.post(
    "/chats/{chat_id}/messages",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_message(
    chat_id: UUID,
    payload: MessageCreate,
    store: Store,
) -> MessageResponse:
    """Append a message to a chat."""
    if payload.sender_id is None:
        raise InvalidInputError("Sender ID is required")
    if not payload.body:
        raise InvalidInputError("Message body is required")

    message = await store.create_message(chat_id, payload.sender_id, payload.body)
    logger.info(f"Message {message.id} created in chat {chat_id}")
    return MessageResponse.model_validate(message)


@router.get("/messages/{message_id}", response_model=MessageResponse)
async def get_message(message_id: UUID, store: Store) -> MessageResponse:
    """Get a single message."""
    message = await store.get_message(message_id)
    if message is None:
        raise NotFoundError("Message not found")

    return MessageResponse.model_validate(message)
