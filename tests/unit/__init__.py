"""Unit tests for individual components in isolation.

Coverage:
    - rendering/: Segmentation rules and HTML rendering
    - conversations/: Store operations and invariants
    - agent/: Reply ordering, timeouts and cancellation
    - config: Environment-driven settings

Stub math engines and reply sources stand in for external services.
"""
