"""Integration tests for components working together as a system.

Coverage:
    - Relay endpoint with real HTTP requests through ASGITransport
    - Conversation controller streaming from the relay app
    - Cancellation and abnormal termination over mocked transports

The LLM provider is replaced by a scripted stub; everything else is real.
"""
