"""User model."""

from typing import TYPE_CHECKING

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import BaseModel

if TYPE_CHECKING:
    from app.models.chat import Chat, Message


class User(BaseModel):
    """User model - created on first login, identified by username."""

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
    )

    # Relationships
    chats: Mapped[list["Chat"]] = relationship(
        "Chat",
        secondary="user_chats",
        back_populates="participants",
    )
    messages: Mapped[list["Message"]] = relationship(
        "Message",
        back_populates="sender",
    )

    def __repr__(self) -> str:
        return f"<User {self.username}>"
