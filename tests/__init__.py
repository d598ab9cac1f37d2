"""
bibresolver Test Suite

Tests are organized into:
- unit/: Unit tests for individual components (adapters run against httpx.MockTransport)
- integration/: Integration tests for the API
"""
