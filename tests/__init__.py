"""Test package for Question Spark Chat.

Unit tests for isolated logic and integration tests for the end-to-end
chat flow.

Structure:
    - unit/: Segmenter, renderer, store, config and reply service tests
    - integration/: Full chat session and HTTP host tests

Leverages pytest with pytest-check for soft assertions and pytest-asyncio
for the reply service.
"""
