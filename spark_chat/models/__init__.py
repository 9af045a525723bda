"""Pydantic models for conversations and messages.

Provides type safety and validation for the conversation store and the UI.

Models:
    - Author: Message author (user or assistant)
    - Rating: Like/dislike feedback on assistant messages
    - Message: Immutable chat message
    - Conversation: Frozen snapshot of a conversation and its messages
    - ConversationSummary: List/history projection of a conversation
"""

from spark_chat.models.schemas import (
    Author,
    Conversation,
    ConversationSummary,
    Message,
    Rating,
)

__all__ = ["Author", "Conversation", "ConversationSummary", "Message", "Rating"]
