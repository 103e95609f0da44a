"""Pytest fixtures and shared test configuration.

Fixtures:
    - relay_config: Relay configuration with a known bearer token
    - provider: Deterministic provider stub emitting scripted tokens
    - app: Relay application wired to the stub provider
    - async_client: HTTPX client for API testing
    - auth_headers: Valid Authorization header
"""

from collections.abc import AsyncGenerator, Sequence

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from streamchat.agent.provider import StreamEnd, StreamFailure, TokenChunk, TokenEvent
from streamchat.api.app import create_app
from streamchat.config import RelayConfig
from streamchat.models.schemas import Message

TEST_TOKEN = "test-relay-key"


class ScriptedProvider:
    """Provider stub replaying a fixed token script.

    Attributes:
        tokens: Tokens emitted on every call, in order.
        error: When set, emitted as a failure after the tokens instead of an end marker.
        calls: Prompts received, one entry per stream() call.
    """

    def __init__(self, tokens: Sequence[str] = (), error: BaseException | None = None) -> None:
        self.tokens = list(tokens)
        self.error = error
        self.calls: list[list[Message]] = []

    async def stream(self, messages: Sequence[Message]) -> AsyncGenerator[TokenEvent]:
        self.calls.append(list(messages))
        for token in self.tokens:
            yield TokenChunk(token)
        if self.error is not None:
            yield StreamFailure(self.error)
        else:
            yield StreamEnd()


@pytest.fixture
def relay_config() -> RelayConfig:
    return RelayConfig(api_key=TEST_TOKEN)


@pytest.fixture
def provider() -> ScriptedProvider:
    """Provider stub emitting "Hel" then "lo"."""
    return ScriptedProvider(["Hel", "lo"])


@pytest.fixture
def app(relay_config: RelayConfig, provider: ScriptedProvider) -> FastAPI:
    return create_app(config=relay_config, provider=provider)


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {TEST_TOKEN}"}


@pytest.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
