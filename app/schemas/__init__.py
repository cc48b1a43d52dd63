"""Pydantic schemas for request/response validation."""

from app.schemas.chat import (
    ChatDetail,
    ChatSummary,
    LastMessageSummary,
    MessageCreate,
    MessageResponse,
    MessageSender,
)
from app.schemas.common import BaseSchema, ErrorResponse, StatusResponse
from app.schemas.user import LoginRequest, UserResponse

__all__ = [
    # Common
    "BaseSchema",
    "ErrorResponse",
    "StatusResponse",
    # User
    "UserResponse",
    "LoginRequest",
    # Chat
    "ChatSummary",
    "ChatDetail",
    "LastMessageSummary",
    "MessageCreate",
    "MessageResponse",
    "MessageSender",
]
