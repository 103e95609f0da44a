"""NiceGUI interface - thin visualization layer for chat interactions.

Responsibilities:
    - Chat message display with streaming support
    - Stop-generating control for the in-flight reply
    - New conversation reset

Contains no business logic. Delegates all turn handling to the
conversation controller. Remains a pure presentation layer.
"""
