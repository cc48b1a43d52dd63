"""Chat schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.common import BaseSchema
from app.schemas.user import UserResponse


class LastMessageSummary(BaseModel):
    """Most recent message of a chat, as shown in the chat list."""

    body: str
    timestamp: datetime


class ChatSummary(BaseModel):
    """Chat list entry. Built per request, never persisted."""

    model_config = ConfigDict(populate_by_name=True)

    id: UUID
    name: str
    participants: list[UserResponse] = []
    last_message: LastMessageSummary | None = Field(
        default=None,
        alias="lastMessage",
    )


class ChatDetail(BaseSchema):
    """Single chat with its stored name and participants."""

    id: UUID
    name: str | None = None
    participants: list[UserResponse] = []


class MessageSender(BaseSchema):
    """Sender expansion embedded in a message."""

    username: str


class MessageResponse(BaseSchema):
    """Chat message response."""

    id: UUID
    chat_id: UUID
    body: str
    created_at: datetime
    sender_id: UUID
    sender: MessageSender | None = None


class MessageCreate(BaseModel):
    """Message creation request. Presence of fields is checked by the endpoint."""

    sender_id: UUID | None = None
    body: str | None = None
