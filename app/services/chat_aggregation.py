"""Chat list aggregation.

Builds the chat list of a user in three phases:

1. membership lookup (chat ids of the user)
2. one batched fetch of those chats with their participants
3. one latest-message fetch per chat, fanned out concurrently

and merges the results into ChatSummary records. A failure in phase 1 or 2
aborts with AggregationFailed. A failure of a single phase-3 fetch only
costs that chat its lastMessage.
"""

import asyncio
import logging
from collections.abc import Sequence
from uuid import UUID

from app.core.config import settings
from app.core.exceptions import AggregationFailed, StoreError
from app.models.chat import Chat, Message
from app.models.user import User
from app.schemas.chat import ChatSummary, LastMessageSummary
from app.schemas.user import UserResponse
from app.services.chat_store import ChatStore

logger = logging.getLogger(__name__)

DEFAULT_CHAT_NAME = "New Chat"


def resolve_display_name(
    stored_name: str | None,
    participants: Sequence[User],
    requester_id: UUID,
) -> str:
    """Name shown for a chat in the requester's chat list.

    A non-empty stored name wins. Otherwise the usernames of the other
    participants, in participant order, joined with ", ". With nobody else
    in the chat the name is "New Chat".
    """
    if stored_name:
        return stored_name

    others = [p.username for p in participants if p.id != requester_id]
    if others:
        return ", ".join(others)
    return DEFAULT_CHAT_NAME


class ChatAggregationService:
    """Produces ChatSummary lists from a ChatStore."""

    def __init__(self, store: ChatStore, max_concurrency: int | None = None):
        self.store = store
        # Each lookup holds a pooled connection while it runs
        self.max_concurrency = max_concurrency or settings.db_pool_size

    async def list_chats_for_user(self, user_id: UUID) -> list[ChatSummary]:
        """List every chat the user belongs to with its latest message.

        Result order follows the batched chat fetch and is unspecified.

        Raises:
            AggregationFailed: membership or chat lookup failed
        """
        try:
            chat_ids = await self.store.list_chat_ids_for_user(user_id)
            if not chat_ids:
                logger.debug(f"User {user_id} has no chats")
                return []

            # Membership rows may repeat a chat id; fetch each chat once
            unique_ids = list(dict.fromkeys(chat_ids))
            chats = await self.store.get_chats_with_participants(unique_ids)
        except StoreError as e:
            logger.error(f"Chat list aggregation failed for user {user_id}: {e.message}")
            raise AggregationFailed(e) from e

        if len(chats) < len(unique_ids):
            logger.warning(
                f"{len(unique_ids) - len(chats)} chat(s) referenced by memberships "
                f"of user {user_id} were not found"
            )

        last_messages = await self._fetch_last_messages(chats)

        summaries = [
            self._build_summary(chat, user_id, last_messages.get(chat.id))
            for chat in chats
        ]
        logger.debug(f"Aggregated {len(summaries)} chats for user {user_id}")
        return summaries

    async def _fetch_last_messages(
        self, chats: Sequence[Chat]
    ) -> dict[UUID, Message | None]:
        """Fan out one latest-message query per chat and key results by chat id."""
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def fetch(chat_id: UUID) -> Message | None:
            async with semaphore:
                return await self.store.get_last_message(chat_id)

        results = await asyncio.gather(
            *(fetch(chat.id) for chat in chats),
            return_exceptions=True,
        )

        last_messages: dict[UUID, Message | None] = {}
        for chat, result in zip(chats, results, strict=True):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                logger.warning(
                    f"Last message lookup failed for chat {chat.id}, "
                    f"returning it without lastMessage: {result}"
                )
                last_messages[chat.id] = None
            else:
                last_messages[chat.id] = result
        return last_messages

    @staticmethod
    def _build_summary(
        chat: Chat, requester_id: UUID, last_message: Message | None
    ) -> ChatSummary:
        return ChatSummary(
            id=chat.id,
            name=resolve_display_name(chat.name, chat.participants, requester_id),
            participants=[UserResponse.model_validate(p) for p in chat.participants],
            last_message=(
                LastMessageSummary(
                    body=last_message.body,
                    timestamp=last_message.created_at,
                )
                if last_message is not None
                else None
            ),
        )


def get_chat_aggregation_service(store: ChatStore) -> ChatAggregationService:
    """Get chat aggregation service instance."""
    return ChatAggregationService(store)
