"""Business logic services."""

from app.services.chat_aggregation import (
    ChatAggregationService,
    get_chat_aggregation_service,
    resolve_display_name,
)
from app.services.chat_store import ChatStore

__all__ = [
    "ChatStore",
    "ChatAggregationService",
    "get_chat_aggregation_service",
    "resolve_display_name",
]
