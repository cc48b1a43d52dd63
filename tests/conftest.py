"""Shared fixtures: an in-memory stand-in for ChatStore and an API client."""

import asyncio
import uuid
from collections.abc import Iterator
from datetime import UTC, datetime, timedelta
from uuid import UUID

import pytest
from fastapi.testclient import TestClient

from app.core.exceptions import StoreError
from app.models.chat import Chat, Message
from app.models.user import User

BASE_TIME = datetime(2025, 1, 1, tzinfo=UTC)


def at(seconds: int) -> datetime:
    """Timestamp `seconds` after BASE_TIME."""
    return BASE_TIME + timedelta(seconds=seconds)


class FakeChatStore:
    """In-memory ChatStore with the same method surface.

    ``fail`` maps a method name to the StoreError it should raise.
    ``last_message_failures`` and ``last_message_delays`` act per chat id on
    get_last_message. ``calls`` records method names in call order.
    """

    def __init__(self) -> None:
        self.users: dict[UUID, User] = {}
        self.chats: dict[UUID, Chat] = {}
        self.memberships: list[tuple[UUID, UUID]] = []
        self.messages: list[Message] = []
        self.calls: list[str] = []
        self.fail: dict[str, StoreError] = {}
        self.last_message_failures: set[UUID] = set()
        self.last_message_delays: dict[UUID, float] = {}
        self.completion_order: list[UUID] = []
        self.in_flight = 0
        self.max_in_flight = 0

    # Builders

    def add_user(self, username: str) -> User:
        user = User(id=uuid.uuid4(), username=username)
        self.users[user.id] = user
        return user

    def add_chat(self, name: str | None, participants: list[User]) -> Chat:
        chat = Chat(id=uuid.uuid4(), name=name)
        # Same order as Chat.participants loads from the database
        chat.participants = sorted(participants, key=lambda u: u.username)
        self.chats[chat.id] = chat
        for user in participants:
            self.memberships.append((user.id, chat.id))
        return chat

    def add_message(
        self, chat: Chat, sender: User, body: str, created_at: datetime
    ) -> Message:
        message = Message(
            id=uuid.uuid4(),
            chat_id=chat.id,
            sender_id=sender.id,
            body=body,
            created_at=created_at,
        )
        message.sender = sender
        self.messages.append(message)
        return message

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if name in self.fail:
            raise self.fail[name]

    # ChatStore surface

    async def list_users(self) -> list[User]:
        self._record("list_users")
        return list(self.users.values())

    async def get_or_create_user(self, username: str) -> User:
        self._record("get_or_create_user")
        for user in self.users.values():
            if user.username == username:
                return user
        return self.add_user(username)

    async def list_chat_ids_for_user(self, user_id: UUID) -> list[UUID]:
        self._record("list_chat_ids_for_user")
        return [chat_id for uid, chat_id in self.memberships if uid == user_id]

    async def get_chats_with_participants(self, chat_ids: list[UUID]) -> list[Chat]:
        self._record("get_chats_with_participants")
        return [self.chats[cid] for cid in chat_ids if cid in self.chats]

    async def get_chat(self, chat_id: UUID) -> Chat | None:
        self._record("get_chat")
        return self.chats.get(chat_id)

    async def get_last_message(self, chat_id: UUID) -> Message | None:
        self._record("get_last_message")
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.last_message_delays.get(chat_id, 0))
        finally:
            self.in_flight -= 1
        self.completion_order.append(chat_id)
        if chat_id in self.last_message_failures:
            raise StoreError(f"timeout reading messages of {chat_id}")
        in_chat = [m for m in self.messages if m.chat_id == chat_id]
        if not in_chat:
            return None
        return max(in_chat, key=lambda m: m.created_at)

    async def list_messages(self, chat_id: UUID) -> list[Message]:
        self._record("list_messages")
        in_chat = [m for m in self.messages if m.chat_id == chat_id]
        return sorted(in_chat, key=lambda m: m.created_at)

    async def get_message(self, message_id: UUID) -> Message | None:
        self._record("get_message")
        for message in self.messages:
            if message.id == message_id:
                return message
        return None

    async def create_message(self, chat_id: UUID, sender_id: UUID, body: str) -> Message:
        self._record("create_message")
        if chat_id not in self.chats or sender_id not in self.users:
            raise StoreError(
                'insert or update on table "messages" violates foreign key constraint'
            )
        created_at = at(len(self.messages) + 1000)
        return self.add_message(self.chats[chat_id], self.users[sender_id], body, created_at)

    async def ping(self) -> None:
        self._record("ping")


@pytest.fixture
def store() -> FakeChatStore:
    return FakeChatStore()


@pytest.fixture
def client(store: FakeChatStore) -> Iterator[TestClient]:
    """API client with the database replaced by the in-memory store."""
    from app.api.deps import get_chat_store
    from main import app

    app.dependency_overrides[get_chat_store] = lambda: store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
