"""In-memory conversation store.

Owns the ordered set of conversations for one chat session and the pointer
to the active conversation. All mutation goes through the store's methods;
readers receive frozen snapshots.
"""

import logging
import uuid
from collections.abc import Callable
from datetime import UTC, datetime

from spark_chat.config import AppConfig, get_app_config
from spark_chat.models.schemas import (
    Author,
    Conversation,
    ConversationSummary,
    Message,
    Rating,
)

logger = logging.getLogger(__name__)

ELLIPSIS = "..."


class NotFoundError(LookupError):
    """Raised when an operation references an unknown entity."""

    pass


class ConversationNotFoundError(NotFoundError):
    """Raised when a conversation id is absent from the store."""

    def __init__(self, conversation_id: str) -> None:
        super().__init__(f"Conversation not found: {conversation_id}")
        self.conversation_id = conversation_id


class MessageNotFoundError(NotFoundError):
    """Raised when a message id is absent from a conversation."""

    def __init__(self, conversation_id: str, message_id: str) -> None:
        super().__init__(
            f"Message {message_id} not found in conversation {conversation_id}"
        )
        self.conversation_id = conversation_id
        self.message_id = message_id


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _new_id() -> str:
    return uuid.uuid4().hex


def truncate(text: str, max_length: int) -> str:
    """Keep the first ``max_length`` characters, marking truncation with an ellipsis."""
    if len(text) <= max_length:
        return text
    return text[:max_length] + ELLIPSIS


class ConversationStore:
    """Ordered collection of conversations with a single active pointer."""

    def __init__(
        self,
        config: AppConfig | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize an empty store.

        Args:
            config: Optional application configuration.
                    Loads from environment if not provided.
            clock: Optional source of the current time, for deterministic tests.
        """
        self._config = config or get_app_config()
        self._clock = clock or _utcnow
        # dict preserves insertion order, which is the display order
        self._conversations: dict[str, Conversation] = {}
        self._active_id: str | None = None
        self._ratings: dict[str, Rating] = {}

    def __len__(self) -> int:
        return len(self._conversations)

    def __contains__(self, conversation_id: object) -> bool:
        return conversation_id in self._conversations

    @property
    def active_conversation_id(self) -> str | None:
        return self._active_id

    def create_conversation(self, seed_question: str) -> str:
        """Create a conversation seeded with the user's first question.

        The new conversation becomes the active one.

        Args:
            seed_question: The question that starts the conversation.

        Returns:
            The new conversation id.

        Raises:
            ValueError: If the seed question is empty.
        """
        if not seed_question:
            raise ValueError("Seed question must not be empty")

        now = self._clock()
        seed = Message(
            id=_new_id(),
            content=seed_question,
            author=Author.USER,
            created_at=now,
        )
        conversation = Conversation(
            id=_new_id(),
            title=truncate(seed_question, self._config.title_max_length),
            summary=truncate(seed_question, self._config.summary_max_length),
            messages=(seed,),
            last_updated=now,
        )

        self._conversations[conversation.id] = conversation
        self._active_id = conversation.id
        logger.info(f"Created conversation {conversation.id}: {conversation.title!r}")
        return conversation.id

    def append_message(self, conversation_id: str, author: Author, content: str) -> str:
        """Append a new message to a conversation.

        Args:
            conversation_id: Target conversation.
            author: Who wrote the message.
            content: Raw message text.

        Returns:
            The new message id.

        Raises:
            ConversationNotFoundError: If the conversation does not exist.
                The store is left unchanged.
        """
        conversation = self.get_conversation(conversation_id)

        now = self._clock()
        last = conversation.last_message
        # Keep creation order monotonic even if the clock steps backwards
        if last is not None and now < last.created_at:
            now = last.created_at

        message = Message(
            id=_new_id(),
            content=content,
            author=Author(author),
            created_at=now,
        )
        self._conversations[conversation_id] = conversation.model_copy(
            update={
                "messages": (*conversation.messages, message),
                "last_updated": max(now, conversation.last_updated),
            }
        )
        logger.debug(
            f"Appended {message.author.value} message {message.id} "
            f"to conversation {conversation_id}"
        )
        return message.id

    def set_active(self, conversation_id: str) -> None:
        """Switch the active conversation.

        Raises:
            ConversationNotFoundError: If the conversation does not exist.
        """
        if conversation_id not in self._conversations:
            raise ConversationNotFoundError(conversation_id)
        self._active_id = conversation_id

    def get_active(self) -> Conversation | None:
        """Return the active conversation snapshot, or None before the first is created."""
        if self._active_id is None:
            return None
        return self._conversations[self._active_id]

    def get_conversation(self, conversation_id: str) -> Conversation:
        """Return a conversation snapshot.

        Raises:
            ConversationNotFoundError: If the conversation does not exist.
        """
        try:
            return self._conversations[conversation_id]
        except KeyError:
            raise ConversationNotFoundError(conversation_id) from None

    def list_conversations(self) -> list[ConversationSummary]:
        """Summaries in insertion (display) order."""
        return [
            ConversationSummary(
                id=conv.id,
                title=conv.title,
                summary=conv.summary,
                last_updated=conv.last_updated,
                message_count=len(conv.messages),
            )
            for conv in self._conversations.values()
        ]

    def recent_conversations(self) -> list[ConversationSummary]:
        """Summaries sorted by ``last_updated``, most recent first."""
        return sorted(
            self.list_conversations(), key=lambda s: s.last_updated, reverse=True
        )

    def rate_message(self, conversation_id: str, message_id: str, rating: Rating) -> None:
        """Record like/dislike feedback on an assistant message.

        Rating again replaces the previous rating.

        Raises:
            ConversationNotFoundError: If the conversation does not exist.
            MessageNotFoundError: If the message is not part of the conversation.
            ValueError: If the message was written by the user.
        """
        conversation = self.get_conversation(conversation_id)
        message = next((m for m in conversation.messages if m.id == message_id), None)
        if message is None:
            raise MessageNotFoundError(conversation_id, message_id)
        if message.is_user:
            raise ValueError("Only assistant messages can be rated")

        self._ratings[message_id] = Rating(rating)
        logger.info(f"Message {message_id} rated as {self._ratings[message_id].value}")

    def get_rating(self, message_id: str) -> Rating | None:
        return self._ratings.get(message_id)
