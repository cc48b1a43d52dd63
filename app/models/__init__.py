"""SQLAlchemy models."""

from app.models.chat import Chat, Message, UserChat
from app.models.user import User

__all__ = [
    "User",
    "Chat",
    "UserChat",
    "Message",
]
