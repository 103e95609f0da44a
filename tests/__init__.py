"""Test package for StreamChat.

Structure:
    - unit/: Individual function and class tests
    - integration/: Relay and controller working together over HTTP

No test talks to a real LLM provider; a scripted provider stub stands in.
Leverages pytest with pytest-check for soft assertions.
"""
