"""Integration tests for complete workflows.

Uses the real simulated reply source and latex2mathml engine. No mocks.
"""
