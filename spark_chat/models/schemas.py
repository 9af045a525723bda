from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Author(str, Enum):
    """Who wrote a message."""

    USER = "user"
    ASSISTANT = "assistant"


class Rating(str, Enum):
    """Feedback left on an assistant message."""

    LIKE = "like"
    DISLIKE = "dislike"


class Message(BaseModel):
    """A single chat message. Immutable once created.

    Attributes:
        id: Unique message identifier.
        content: Raw message text, possibly containing LaTeX markup.
        author: The speaker (user or assistant).
        created_at: Creation timestamp.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    content: str
    author: Author
    created_at: datetime

    @property
    def is_user(self) -> bool:
        return self.author is Author.USER


class Conversation(BaseModel):
    """An ordered sequence of messages sharing one context.

    Snapshots are frozen; the store swaps in an updated copy on every append.

    Attributes:
        id: Unique conversation identifier.
        title: Short title derived from the seed question.
        summary: Short description derived from the seed question.
        messages: Messages in creation order.
        last_updated: Timestamp of the latest change, used for recency sorting.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    title: str
    summary: str
    messages: tuple[Message, ...] = ()
    last_updated: datetime

    @property
    def last_message(self) -> Message | None:
        return self.messages[-1] if self.messages else None


class ConversationSummary(BaseModel):
    """List/history projection of a conversation.

    Attributes:
        id: Conversation identifier.
        title: Conversation title.
        summary: Conversation summary.
        last_updated: Recency sort key.
        message_count: Number of messages in the conversation.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    summary: str
    last_updated: datetime
    message_count: int = Field(..., ge=0)
