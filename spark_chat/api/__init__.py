"""FastAPI host for the chat application.

Serves the NiceGUI pages and a health endpoint for process monitoring.

Endpoints:
    - GET /health: Service health status
"""

from spark_chat.api.app import app, create_app

__all__ = ["app", "create_app"]
