"""Client-side conversation handling.

Responsibilities:
    - Immutable conversation state and the reducer over turn actions
    - Streaming read loop against the relay endpoint
    - Cooperative cancellation of the in-flight turn

History lives only here and is replayed to the relay on every turn.
"""

from streamchat.conversation.controller import ConversationController
from streamchat.conversation.state import (
    Abort,
    AddMessage,
    CancelHandle,
    ConversationState,
    Done,
    UpdatePromptAnswer,
    reduce,
)

__all__ = [
    "Abort",
    "AddMessage",
    "CancelHandle",
    "ConversationController",
    "ConversationState",
    "Done",
    "UpdatePromptAnswer",
    "reduce",
]
