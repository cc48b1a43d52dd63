"""Chat models."""

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base
from app.models.base import BaseModel

if TYPE_CHECKING:
    from app.models.user import User


class UserChat(Base):
    """Membership of a user in a chat (many-to-many join row)."""

    __tablename__ = "user_chats"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    chat_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("chats.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<UserChat {self.user_id} in {self.chat_id}>"


class Chat(BaseModel):
    """Chat model. A chat without a name is displayed by its participants."""

    __tablename__ = "chats"

    name: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )

    # Relationships
    participants: Mapped[list["User"]] = relationship(
        "User",
        secondary="user_chats",
        back_populates="chats",
        # Display names join participants in this order
        order_by="User.username",
    )
    messages: Mapped[list["Message"]] = relationship(
        "Message",
        back_populates="chat",
        cascade="all, delete-orphan",
        order_by="Message.created_at",
    )

    def __repr__(self) -> str:
        return f"<Chat {self.id}>"


class Message(BaseModel):
    """Chat message model. Append-only."""

    __tablename__ = "messages"
    __table_args__ = (
        # Serves both the ascending history and the latest-message lookup
        Index("ix_messages_chat_id_created_at", "chat_id", "created_at"),
    )

    chat_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("chats.id", ondelete="CASCADE"),
        nullable=False,
    )
    sender_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    body: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    # Relationships
    chat: Mapped["Chat"] = relationship(
        "Chat",
        back_populates="messages",
    )
    sender: Mapped["User"] = relationship(
        "User",
        back_populates="messages",
    )

    def __repr__(self) -> str:
        return f"<Message {self.id} in {self.chat_id}>"
