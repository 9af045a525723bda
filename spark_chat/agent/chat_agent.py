"""Assistant reply coordination.

The reply source is the only asynchronous boundary in the chat flow. In
this demo it is a timer that returns canned answers; a network or
inference client can replace it by implementing ``ReplySource``.

ReplyService guarantees:

1. **Ordering** - a reply is appended strictly after the user message that
   provoked it. Sends to the same conversation are serialised with a
   per-conversation lock so appends never interleave.

2. **Bounded wait** - every reply is awaited under ``reply_timeout``. A
   source that never answers raises ReplyTimeoutError instead of leaving
   the loading indicator spinning forever.

3. **Stale replies are dropped** - before appending, the service checks the
   conversation still exists and (unless configured otherwise) is still the
   active one.

4. **Cancellation** - in-flight replies run as tasks that can be cancelled
   per conversation.
"""

import asyncio
import logging
from typing import Protocol

from spark_chat.config import AppConfig, get_app_config
from spark_chat.conversations.store import ConversationStore
from spark_chat.models.schemas import Author

logger = logging.getLogger(__name__)

INITIAL_REPLY_TEMPLATE = (
    'I understand your question about: "{question}". Let me help you with that.\n\n'
    "For example, if you're asking about mathematics, here's the quadratic formula:\n\n"
    "$$x = \\frac{{-b \\pm \\sqrt{{b^2 - 4ac}}}}{{2a}}$$\n\n"
    "And here's an inline formula: $E = mc^2$\n\n"
    "This is a comprehensive response that addresses your concerns and provides "
    "detailed information to help solve your doubt."
)

FOLLOW_UP_REPLY = (
    "Thank you for your follow-up question. Here's a detailed response that "
    "addresses your query with helpful information and guidance.\n\n"
    "Here's some mathematical notation: "
    "$$\\int_{-\\infty}^{\\infty} e^{-x^2} dx = \\sqrt{\\pi}$$\n\n"
    "And some inline math: The value of $\\pi$ is approximately 3.14159."
)


class ReplyTimeoutError(TimeoutError):
    """Raised when a reply does not arrive within the configured timeout."""

    def __init__(self, conversation_id: str, timeout: float) -> None:
        super().__init__(
            f"No reply for conversation {conversation_id} within {timeout:g}s"
        )
        self.conversation_id = conversation_id
        self.timeout = timeout


class ReplySource(Protocol):
    """Produces assistant text for a user message."""

    async def fetch_reply(self, conversation_id: str, user_text: str) -> str: ...


class SimulatedReplySource:
    """Timer-based stand-in for a real assistant.

    The first reply in a conversation echoes the question; later replies
    return a fixed follow-up. Both carry display and inline LaTeX.
    """

    def __init__(self, config: AppConfig | None = None) -> None:
        self._config = config or get_app_config()
        self._answered: set[str] = set()

    async def fetch_reply(self, conversation_id: str, user_text: str) -> str:
        if conversation_id not in self._answered:
            await asyncio.sleep(self._config.initial_reply_delay)
            self._answered.add(conversation_id)
            return INITIAL_REPLY_TEMPLATE.format(question=user_text)

        await asyncio.sleep(self._config.follow_up_reply_delay)
        return FOLLOW_UP_REPLY


class ReplyService:
    """Coordinates user sends and assistant replies against a store."""

    def __init__(
        self,
        store: ConversationStore,
        source: ReplySource | None = None,
        config: AppConfig | None = None,
    ) -> None:
        """Initialize the reply service.

        Args:
            store: Conversation store that receives the appends.
            source: Optional reply source. Uses the simulated source if not provided.
            config: Optional application configuration.
                    Loads from environment if not provided.
        """
        self._config = config or get_app_config()
        self._store = store
        self._source = source or SimulatedReplySource(self._config)
        self._locks: dict[str, asyncio.Lock] = {}
        self._tasks: dict[str, set[asyncio.Task]] = {}

    def _lock_for(self, conversation_id: str) -> asyncio.Lock:
        if conversation_id not in self._locks:
            self._locks[conversation_id] = asyncio.Lock()
        return self._locks[conversation_id]

    def _accepts_reply(self, conversation_id: str) -> bool:
        if conversation_id not in self._store:
            return False
        if self._config.discard_inactive_replies:
            return self._store.active_conversation_id == conversation_id
        return True

    async def _reply(self, conversation_id: str, user_text: str) -> str | None:
        try:
            content = await asyncio.wait_for(
                self._source.fetch_reply(conversation_id, user_text),
                timeout=self._config.reply_timeout,
            )
        except TimeoutError:
            logger.warning(
                f"Reply for conversation {conversation_id} timed out "
                f"after {self._config.reply_timeout:g}s"
            )
            raise ReplyTimeoutError(conversation_id, self._config.reply_timeout) from None

        if not self._accepts_reply(conversation_id):
            logger.info(f"Discarding reply for inactive conversation {conversation_id}")
            return None

        return self._store.append_message(conversation_id, Author.ASSISTANT, content)

    async def request_reply(self, conversation_id: str, user_text: str) -> str | None:
        """Fetch and append the assistant reply to a user message.

        Args:
            conversation_id: Conversation the user message belongs to.
            user_text: The user's message.

        Returns:
            The appended reply's message id, or None if the reply was discarded.

        Raises:
            ReplyTimeoutError: If the source does not answer within ``reply_timeout``.
        """
        async with self._lock_for(conversation_id):
            return await self._reply(conversation_id, user_text)

    async def send_message(
        self, conversation_id: str, text: str
    ) -> tuple[str, str | None]:
        """Append a user message, then wait for and append the reply.

        Returns:
            Tuple of (user message id, reply message id or None).

        Raises:
            ConversationNotFoundError: If the conversation does not exist.
            ReplyTimeoutError: If the reply does not arrive in time.
        """
        async with self._lock_for(conversation_id):
            message_id = self._store.append_message(conversation_id, Author.USER, text)
            reply_id = await self._reply(conversation_id, text)
        return message_id, reply_id

    def _track(self, conversation_id: str, coro) -> asyncio.Task:
        task = asyncio.create_task(coro)
        pending = self._tasks.setdefault(conversation_id, set())
        pending.add(task)
        task.add_done_callback(pending.discard)
        return task

    def start_reply(self, conversation_id: str, user_text: str) -> asyncio.Task:
        """Schedule ``request_reply`` as a cancellable task."""
        return self._track(conversation_id, self.request_reply(conversation_id, user_text))

    def start_send(self, conversation_id: str, text: str) -> asyncio.Task:
        """Schedule ``send_message`` as a cancellable task."""
        return self._track(conversation_id, self.send_message(conversation_id, text))

    def is_pending(self, conversation_id: str) -> bool:
        return any(not task.done() for task in self._tasks.get(conversation_id, ()))

    def cancel_pending(self, conversation_id: str) -> int:
        """Cancel in-flight reply tasks for a conversation.

        Returns:
            Number of tasks cancelled.
        """
        cancelled = 0
        for task in list(self._tasks.get(conversation_id, ())):
            if task.cancel():
                cancelled += 1
        if cancelled:
            logger.info(f"Cancelled {cancelled} pending reply task(s) for {conversation_id}")
        return cancelled
