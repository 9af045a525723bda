"""Application configuration with environment variable loading.

Pydantic-based settings for the conversation store, the reply service
and the NiceGUI shell. Every field can be overridden from the environment
or a .env file.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load environment variables from .env file
load_dotenv()

_TRUTHY = {"1", "true", "yes", "on"}


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in _TRUTHY


class AppConfig(BaseModel):
    """Configuration for the chat application.

    Attributes:
        app_title: Title shown in the browser tab and on the landing form.
        title_max_length: Characters of the seed question kept in a conversation title.
        summary_max_length: Characters of the seed question kept in a conversation summary.
        initial_reply_delay: Seconds the simulated assistant waits before its first reply.
        follow_up_reply_delay: Seconds the simulated assistant waits before later replies.
        reply_timeout: Upper bound in seconds on waiting for any reply.
        discard_inactive_replies: Drop replies whose conversation is no longer active.
        storage_secret: Secret used by NiceGUI to sign browser storage.
    """

    app_title: str = Field(
        default_factory=lambda: os.getenv("APP_TITLE", "Question Spark Chat"),
        description="Application title",
    )
    title_max_length: int = Field(
        default_factory=lambda: int(os.getenv("TITLE_MAX_LENGTH", "50")),
        ge=1,
        description="Maximum seed characters kept in a conversation title",
    )
    summary_max_length: int = Field(
        default_factory=lambda: int(os.getenv("SUMMARY_MAX_LENGTH", "30")),
        ge=1,
        description="Maximum seed characters kept in a conversation summary",
    )
    initial_reply_delay: float = Field(
        default_factory=lambda: float(os.getenv("INITIAL_REPLY_DELAY", "1.5")),
        ge=0.0,
        description="Delay before the first simulated reply, in seconds",
    )
    follow_up_reply_delay: float = Field(
        default_factory=lambda: float(os.getenv("FOLLOW_UP_REPLY_DELAY", "2.0")),
        ge=0.0,
        description="Delay before follow-up simulated replies, in seconds",
    )
    reply_timeout: float = Field(
        default_factory=lambda: float(os.getenv("REPLY_TIMEOUT", "30.0")),
        gt=0.0,
        description="Maximum time to wait for a reply, in seconds",
    )
    discard_inactive_replies: bool = Field(
        default_factory=lambda: _env_bool("DISCARD_INACTIVE_REPLIES", "true"),
        description="Ignore replies that arrive after their conversation lost focus",
    )
    storage_secret: str = Field(
        default_factory=lambda: os.getenv("NICEGUI_STORAGE_SECRET", "spark-chat-secret"),
        description="Secret for NiceGUI browser storage",
    )

    @field_validator("app_title")
    @classmethod
    def validate_app_title(cls, v: str) -> str:
        """Validate that the title is non-empty."""
        if not v or not v.strip():
            raise ValueError("app_title must not be empty. Set APP_TITLE in .env")
        return v.strip()


def get_app_config() -> AppConfig:
    """Create application configuration from environment.

    Returns:
        Configured AppConfig instance.

    Raises:
        ValidationError: If an environment override is out of range.
    """
    return AppConfig()
