"""API dependencies."""

from typing import Annotated

from fastapi import Depends

from app.core.database import async_session_maker
from app.services.chat_aggregation import (
    ChatAggregationService,
    get_chat_aggregation_service,
)
from app.services.chat_store import ChatStore


def get_chat_store() -> ChatStore:
    """Dependency for the data access client bound to the shared session factory."""
    return ChatStore(async_session_maker)


def get_aggregation_service(
    store: Annotated[ChatStore, Depends(get_chat_store)],
) -> ChatAggregationService:
    """Dependency for the chat aggregation service."""
    return get_chat_aggregation_service(store)


Store = Annotated[ChatStore, Depends(get_chat_store)]
AggregationService = Annotated[ChatAggregationService, Depends(get_aggregation_service)]
