"""Conversation state for a chat session.

Holds ordered message history per conversation and the active pointer.

Responsibilities:
    - Conversation creation from a seed question
    - Ordered, atomic message appends
    - Active conversation switching
    - Recency-sorted history projections
    - Like/dislike feedback on assistant messages
"""

from spark_chat.conversations.store import (
    ConversationNotFoundError,
    ConversationStore,
    MessageNotFoundError,
    NotFoundError,
)

__all__ = [
    "ConversationNotFoundError",
    "ConversationStore",
    "MessageNotFoundError",
    "NotFoundError",
]
