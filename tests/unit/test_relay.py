"""Unit tests for prompt assembly and the token forwarding loop."""

from collections.abc import AsyncGenerator

import pytest

from streamchat.agent.provider import StreamEnd, StreamFailure, TokenChunk, TokenEvent
from streamchat.api.relay import SYSTEM_PROMPT, ProviderStreamError, build_prompt, relay_tokens
from streamchat.models.schemas import Message, Role


async def _events(*events: TokenEvent) -> AsyncGenerator[TokenEvent]:
    for event in events:
        yield event


async def _drain(stream: AsyncGenerator[bytes]) -> list[bytes]:
    return [chunk async for chunk in stream]


class TestBuildPrompt:
    """Tests for build_prompt."""

    def test_empty_history(self) -> None:
        assert build_prompt([], "hi") == [
            Message(role=Role.SYSTEM, text=SYSTEM_PROMPT),
            Message(role=Role.HUMAN, text="hi"),
        ]

    def test_history_sits_between_system_and_prompt(self) -> None:
        history = [
            Message(role=Role.HUMAN, text="hi"),
            Message(role=Role.AI, text="Hello"),
        ]

        prompt = build_prompt(history, "How are you?")

        assert [m.role for m in prompt] == [Role.SYSTEM, Role.HUMAN, Role.AI, Role.HUMAN]
        assert prompt[1:3] == history
        assert prompt[-1].text == "How are you?"

    def test_system_message_is_fixed(self) -> None:
        assert SYSTEM_PROMPT == "You are a friendly assistant."


class TestRelayTokens:
    """Tests for relay_tokens."""

    async def test_forwards_tokens_verbatim_in_order(self) -> None:
        chunks = await _drain(
            relay_tokens(_events(TokenChunk("Hel"), TokenChunk("lo"), TokenChunk(" ✓"), StreamEnd()))
        )

        assert chunks == [b"Hel", b"lo", " ✓".encode()]

    async def test_end_marker_stops_forwarding(self) -> None:
        chunks = await _drain(relay_tokens(_events(TokenChunk("a"), StreamEnd(), TokenChunk("b"))))

        assert chunks == [b"a"]

    async def test_failure_raises_after_forwarded_tokens(self) -> None:
        received: list[bytes] = []

        with pytest.raises(ProviderStreamError, match="quota exceeded"):
            async for chunk in relay_tokens(
                _events(TokenChunk("Sor"), StreamFailure(RuntimeError("quota exceeded")))
            ):
                received.append(chunk)

        assert received == [b"Sor"]

    async def test_missing_end_marker_is_an_error(self) -> None:
        with pytest.raises(ProviderStreamError, match="without an end marker"):
            await _drain(relay_tokens(_events(TokenChunk("partial"))))

    async def test_closes_provider_stream_when_consumer_stops(self) -> None:
        closed = False

        async def events() -> AsyncGenerator[TokenEvent]:
            nonlocal closed
            try:
                yield TokenChunk("a")
                yield TokenChunk("b")
                yield StreamEnd()
            finally:
                closed = True

        stream = relay_tokens(events())
        assert await anext(stream) == b"a"
        await stream.aclose()

        assert closed is True
