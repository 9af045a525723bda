"""Assistant reply orchestration.

Handles the asynchronous boundary between a user message and its reply.

Responsibilities:
    - Injectable reply sources (simulated timer by default)
    - Ordered appends of user messages and replies
    - Bounded waiting and per-conversation cancellation
    - Dropping replies for conversations that lost focus

Maintains clean separation from the UI layer.
"""

from spark_chat.agent.chat_agent import (
    ReplyService,
    ReplySource,
    ReplyTimeoutError,
    SimulatedReplySource,
)

__all__ = ["ReplyService", "ReplySource", "ReplyTimeoutError", "SimulatedReplySource"]
