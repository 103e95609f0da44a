"""Conversation state machine.

State is an immutable snapshot; every action produces a new one through
``reduce``. Three effective states are encoded in two flags:

    Idle                (assistant_thinking=False, is_writing=False)
    AwaitingFirstToken  (assistant_thinking=True)
    Streaming           (is_writing=True)
"""

import asyncio
import logging
from dataclasses import dataclass, replace

from streamchat.models.schemas import Message, Role

logger = logging.getLogger(__name__)


class CancelHandle:
    """Stops the network task of one in-flight turn."""

    def __init__(self) -> None:
        self._task: asyncio.Task[None] | None = None
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def bind(self, task: asyncio.Task[None]) -> None:
        self._task = task

    def cancel(self) -> None:
        self._cancelled = True
        if self._task is not None and not self._task.done():
            self._task.cancel()


@dataclass(frozen=True)
class ConversationState:
    """Snapshot of the chat transcript and turn flags.

    Attributes:
        messages: The conversation log, oldest first.
        assistant_thinking: A turn is in flight and no token has arrived yet.
        is_writing: A turn is in flight and tokens are arriving.
        active_cancel_handle: Handle of the in-flight turn, None at rest.
    """

    messages: tuple[Message, ...] = ()
    assistant_thinking: bool = False
    is_writing: bool = False
    active_cancel_handle: CancelHandle | None = None

    @property
    def in_flight(self) -> bool:
        return self.active_cancel_handle is not None


@dataclass(frozen=True)
class AddMessage:
    prompt: str
    cancel_handle: CancelHandle


@dataclass(frozen=True)
class UpdatePromptAnswer:
    text: str


@dataclass(frozen=True)
class Abort:
    pass


@dataclass(frozen=True)
class Done:
    pass


ConversationAction = AddMessage | UpdatePromptAnswer | Abort | Done


def _append_to_last(messages: tuple[Message, ...], text: str) -> tuple[Message, ...]:
    last = messages[-1]
    return (*messages[:-1], last.model_copy(update={"text": last.text + text}))


def reduce(state: ConversationState, action: ConversationAction) -> ConversationState:
    """Apply one action to a state snapshot.

    Args:
        state: Current snapshot.
        action: Action to apply.

    Returns:
        The next snapshot. Unknown actions return ``state`` unchanged.
    """
    match action:
        case AddMessage(prompt=prompt, cancel_handle=handle):
            return replace(
                state,
                messages=(
                    *state.messages,
                    Message(role=Role.HUMAN, text=prompt),
                    Message(role=Role.AI, text=""),
                ),
                assistant_thinking=True,
                is_writing=False,
                active_cancel_handle=handle,
            )
        case UpdatePromptAnswer(text=text):
            if not state.messages:
                logger.warning("Dropping answer chunk with no message to append to")
                return state
            return replace(
                state,
                messages=_append_to_last(state.messages, text),
                assistant_thinking=False,
                is_writing=True,
            )
        case Abort() | Done():
            return replace(
                state,
                assistant_thinking=False,
                is_writing=False,
                active_cancel_handle=None,
            )
        case _:
            return state
