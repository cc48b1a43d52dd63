"""Data access for users, chats, memberships and messages.

Every method opens its own short-lived session from the shared session
factory, so one ChatStore can serve concurrently fanned-out calls.
Any SQLAlchemy failure, and any connection failure surfacing as OSError,
is re-raised as StoreError with the underlying message.
"""

import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import joinedload, selectinload

from app.core.exceptions import StoreError
from app.models.chat import Chat, Message, UserChat
from app.models.user import User

logger = logging.getLogger(__name__)


def _store_error_message(error: SQLAlchemyError | OSError) -> str:
    """Prefer the DBAPI error text over SQLAlchemy's wrapped rendering.

    Connection failures at pool checkout (refused, unreachable) reach us as
    plain OSError and carry their own message.
    """
    orig = getattr(error, "orig", None)
    if orig is not None:
        return str(orig)
    return str(error)


@contextmanager
def _store_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except (SQLAlchemyError, OSError) as e:
        message = _store_error_message(e)
        logger.error(f"Store operation {operation} failed: {message}")
        raise StoreError(message) from e


class ChatStore:
    """Parameterized queries over the chat tables."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    async def list_users(self) -> Sequence[User]:
        with _store_errors("list_users"):
            async with self._session_factory() as db:
                result = await db.execute(select(User))
                return result.scalars().all()

    async def get_or_create_user(self, username: str) -> User:
        """Return the user with this username, creating it if absent.

        The insert is conditional on the unique username, so concurrent
        logins for the same new name converge on one row.
        """
        with _store_errors("get_or_create_user"):
            async with self._session_factory() as db:
                await db.execute(
                    insert(User)
                    .values(username=username)
                    .on_conflict_do_nothing(index_elements=[User.username])
                )
                result = await db.execute(
                    select(User).where(User.username == username)
                )
                user = result.scalar_one()
                await db.commit()
                return user

    # -------------------------------------------------------------------------
    # Chats
    # -------------------------------------------------------------------------

    async def list_chat_ids_for_user(self, user_id: UUID) -> list[UUID]:
        """Chat ids of every membership row of a user."""
        with _store_errors("list_chat_ids_for_user"):
            async with self._session_factory() as db:
                result = await db.execute(
                    select(UserChat.chat_id).where(UserChat.user_id == user_id)
                )
                return list(result.scalars().all())

    async def get_chats_with_participants(
        self, chat_ids: Sequence[UUID]
    ) -> Sequence[Chat]:
        """Batched fetch of chats by id, participants eagerly loaded."""
        with _store_errors("get_chats_with_participants"):
            async with self._session_factory() as db:
                result = await db.execute(
                    select(Chat)
                    .options(selectinload(Chat.participants))
                    .where(Chat.id.in_(chat_ids))
                )
                return result.scalars().all()

    async def get_chat(self, chat_id: UUID) -> Chat | None:
        with _store_errors("get_chat"):
            async with self._session_factory() as db:
                result = await db.execute(
                    select(Chat)
                    .options(selectinload(Chat.participants))
                    .where(Chat.id == chat_id)
                )
                return result.scalar_one_or_none()

    # -------------------------------------------------------------------------
    # Messages
    # -------------------------------------------------------------------------

    async def get_last_message(self, chat_id: UUID) -> Message | None:
        """Most recent message of a chat by created_at."""
        with _store_errors("get_last_message"):
            async with self._session_factory() as db:
                result = await db.execute(
                    select(Message)
                    .where(Message.chat_id == chat_id)
                    .order_by(Message.created_at.desc())
                    .limit(1)
                )
                return result.scalars().first()

    async def list_messages(self, chat_id: UUID) -> Sequence[Message]:
        """Messages of a chat, oldest first, sender expanded."""
        with _store_errors("list_messages"):
            async with self._session_factory() as db:
                result = await db.execute(
                    select(Message)
                    .options(joinedload(Message.sender))
                    .where(Message.chat_id == chat_id)
                    .order_by(Message.created_at.asc())
                )
                return result.scalars().all()

    async def get_message(self, message_id: UUID) -> Message | None:
        with _store_errors("get_message"):
            async with self._session_factory() as db:
                result = await db.execute(
                    select(Message)
                    .options(joinedload(Message.sender))
                    .where(Message.id == message_id)
                )
                return result.scalar_one_or_none()

    async def create_message(
        self, chat_id: UUID, sender_id: UUID, body: str
    ) -> Message:
        """Append a message. Unknown chat or sender ids violate foreign keys."""
        with _store_errors("create_message"):
            async with self._session_factory() as db:
                message = Message(chat_id=chat_id, sender_id=sender_id, body=body)
                db.add(message)
                await db.commit()

                # Reload with the server-assigned created_at and the sender
                result = await db.execute(
                    select(Message)
                    .options(joinedload(Message.sender))
                    .where(Message.id == message.id)
                    .execution_options(populate_existing=True)
                )
                return result.scalar_one()

    # -------------------------------------------------------------------------
    # Health
    # -------------------------------------------------------------------------

    async def ping(self) -> None:
        """Round-trip a trivial query."""
        with _store_errors("ping"):
            async with self._session_factory() as db:
                await db.execute(select(1))
