"""Conversation controller driving the relay's streaming endpoint.

Owns the conversation state, starts one network turn at a time, and feeds
each received chunk through the reducer in the order it was read.
"""

import asyncio
import logging
from collections.abc import Callable

import httpx

from streamchat.conversation.state import (
    Abort,
    AddMessage,
    CancelHandle,
    ConversationAction,
    ConversationState,
    Done,
    UpdatePromptAnswer,
    reduce,
)
from streamchat.models.schemas import Message

logger = logging.getLogger(__name__)

StateListener = Callable[[ConversationState], None]


class ConversationController:
    """Client-side turn manager for the streaming relay.

    Attributes:
        endpoint: Relay path, relative to the client's base URL.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        auth_token: str,
        endpoint: str = "/api",
    ) -> None:
        self._client = client
        self._auth_token = auth_token
        self.endpoint = endpoint
        self._state = ConversationState()
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> ConversationState:
        return self._state

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a callback invoked with every new state snapshot.

        Returns:
            A callable that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, action: ConversationAction) -> None:
        self._state = reduce(self._state, action)
        for listener in list(self._listeners):
            listener(self._state)

    def submit(self, prompt: str) -> asyncio.Task[None] | None:
        """Start a new turn.

        Ignored when the prompt is empty or a turn is already in flight.

        Args:
            prompt: The user's message.

        Returns:
            The task running the turn, or None if the submit was ignored.
        """
        if not prompt or self._state.in_flight:
            return None

        history = self._state.messages
        handle = CancelHandle()
        self.dispatch(AddMessage(prompt=prompt, cancel_handle=handle))

        task = asyncio.get_running_loop().create_task(
            self._run_turn(history, prompt, handle)
        )
        handle.bind(task)
        return task

    def cancel(self) -> None:
        """Stop the in-flight turn, keeping whatever text already arrived."""
        handle = self._state.active_cancel_handle
        if handle is None:
            return
        handle.cancel()
        logger.info("Turn cancelled by user")
        self.dispatch(Abort())

    def reset(self) -> None:
        """Cancel any in-flight turn and start an empty conversation."""
        self.cancel()
        self._state = ConversationState()
        for listener in list(self._listeners):
            listener(self._state)

    def _dispatch_for(self, handle: CancelHandle, action: ConversationAction) -> None:
        # A turn whose handle was replaced or cleared no longer owns the log.
        if self._state.active_cancel_handle is handle:
            self.dispatch(action)

    async def _run_turn(
        self,
        history: tuple[Message, ...],
        prompt: str,
        handle: CancelHandle,
    ) -> None:
        payload = {"messages": [m.to_wire() for m in history], "prompt": prompt}
        headers = {"Authorization": f"Bearer {self._auth_token}"}

        try:
            async with self._client.stream(
                "POST", self.endpoint, json=payload, headers=headers
            ) as response:
                if response.status_code != 200:
                    body = (await response.aread()).decode("utf-8", errors="replace")
                    logger.error(f"Relay rejected turn: HTTP {response.status_code} {body}")
                else:
                    async for chunk in response.aiter_text():
                        if chunk:
                            self._dispatch_for(handle, UpdatePromptAnswer(text=chunk))
        except httpx.HTTPError as e:
            logger.warning(f"Stream ended abnormally: {e}")
        except Exception as e:
            logger.error(f"Turn failed: {e}")
            raise
        finally:
            # cancel() has already reset the state for a cancelled turn
            if not handle.cancelled:
                self._dispatch_for(handle, Done())
