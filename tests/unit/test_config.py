"""Unit tests for AppConfig."""

from unittest.mock import patch

import pytest
from pydantic import ValidationError

from spark_chat.config import AppConfig, get_app_config


class TestAppConfig:
    """Tests for AppConfig validation."""

    def test_config_with_default_values(self) -> None:
        """Config uses the demo's defaults."""
        with patch.dict("os.environ", {}, clear=True):
            config = AppConfig()

        assert config.app_title == "Question Spark Chat"
        assert config.title_max_length == 50
        assert config.summary_max_length == 30
        assert config.initial_reply_delay == 1.5
        assert config.follow_up_reply_delay == 2.0
        assert config.reply_timeout == 30.0
        assert config.discard_inactive_replies is True

    def test_config_reads_environment(self) -> None:
        """Environment variables override defaults."""
        env = {
            "TITLE_MAX_LENGTH": "20",
            "REPLY_TIMEOUT": "5",
            "DISCARD_INACTIVE_REPLIES": "false",
            "APP_TITLE": "  Math Help  ",
        }
        with patch.dict("os.environ", env, clear=True):
            config = get_app_config()

        assert config.title_max_length == 20
        assert config.reply_timeout == 5.0
        assert config.discard_inactive_replies is False
        assert config.app_title == "Math Help"

    def test_config_fails_with_zero_timeout(self) -> None:
        """Config rejects a non-positive reply timeout."""
        with pytest.raises(ValidationError) as exc_info:
            AppConfig(reply_timeout=0)

        assert "reply_timeout" in str(exc_info.value)

    def test_config_fails_with_negative_delay(self) -> None:
        """Config rejects negative reply delays."""
        with pytest.raises(ValidationError) as exc_info:
            AppConfig(initial_reply_delay=-1)

        assert "initial_reply_delay" in str(exc_info.value)

    def test_config_fails_with_zero_title_length(self) -> None:
        """Config rejects a title length below 1."""
        with pytest.raises(ValidationError):
            AppConfig(title_max_length=0)

    def test_config_fails_with_blank_title(self) -> None:
        """Config rejects a whitespace-only application title."""
        with pytest.raises(ValidationError) as exc_info:
            AppConfig(app_title="   ")

        assert "app_title must not be empty" in str(exc_info.value)
