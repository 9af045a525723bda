"""Question Spark Chat - ask a question, get answers with rendered math.

Combines NiceGUI for the chat interface, FastAPI as the host process,
latex2mathml for math rendering, and Pydantic for data validation.

Components:
    - conversations: In-memory conversation store
    - rendering: Text/LaTeX segmentation and HTML rendering
    - agent: Assistant reply coordination
    - api: FastAPI application hosting the UI
    - ui: Web interface for chat interactions
    - models: Conversation and message schemas
"""

__version__ = "0.1.0"
