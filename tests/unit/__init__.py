"""Unit tests for individual components in isolation.

Coverage:
    - models/: Message protocol validation and wire format
    - agent/: Provider configuration and token event production
    - api/: Prompt assembly and the forwarding loop
    - conversation/: Reducer transitions

Uses mocks for external services. Leverages pytest-check for multiple
assertions per test.
"""
