"""Main application entry point.

Runs FastAPI (port 8000) with the NiceGUI chat interface mounted on it.
Environment variables are loaded from .env file.
"""

import logging
import os
import sys

from dotenv import load_dotenv

# Load environment variables before any other imports that might need them
load_dotenv()

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


def main() -> None:
    """Run FastAPI with NiceGUI mounted on the same server.

    FastAPI serves the health check, NiceGUI serves the chat UI.
    Both accessible on one port (default 8000).
    """
    import uvicorn
    from nicegui import ui

    from spark_chat.api.app import create_app
    from spark_chat.config import get_app_config
    from spark_chat.ui.chat_page import chat_page  # noqa: F401 - Registers the page

    config = get_app_config()
    app = create_app()

    ui.run_with(
        app,
        title=config.app_title,
        favicon="💬",
        storage_secret=config.storage_secret,
    )

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    logger.info(f"Starting {config.app_title} on http://{host}:{port}")
    logger.info(f"Health check available at http://{host}:{port}/health")

    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


if __name__ == "__main__":
    main()
