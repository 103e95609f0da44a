"""Token-streaming completion provider backed by agno.

The relay never sees provider callbacks. A provider exposes one operation,
``stream(messages)``, returning a lazy async sequence of token events that
ends with exactly one ``StreamEnd`` or ``StreamFailure``. The sequence is
single-use: each call opens a fresh provider session.

Architecture Decisions:

1. **Agent per call** - The relay is stateless, and history arrives in the
   request body. Building the agno ``Agent`` inside ``stream`` means no
   conversation state survives between requests and no two requests share a
   session.

2. **Retries live in the client** - ``OpenAIChat`` is built with
   ``max_retries`` from config (1 by default). Nothing above this module
   retries.

3. **Errors become events** - agno may either raise or emit a run-error
   event depending on where the failure happens. Both are normalized into a
   single ``StreamFailure`` so the forwarding loop handles one shape.
"""

import logging
from collections.abc import AsyncGenerator, Sequence
from dataclasses import dataclass
from typing import Protocol

from agno.agent import Agent
from agno.models.message import Message as AgnoMessage
from agno.models.openai import OpenAIChat
from agno.run.agent import RunEvent

from streamchat.agent.config import AgentConfig, get_agent_config
from streamchat.models.schemas import Message, Role

logger = logging.getLogger(__name__)

_AGNO_ROLES: dict[Role, str] = {
    Role.HUMAN: "user",
    Role.AI: "assistant",
    Role.SYSTEM: "system",
}


@dataclass(frozen=True)
class TokenChunk:
    """A token fragment emitted by the provider."""

    text: str


@dataclass(frozen=True)
class StreamEnd:
    """The provider finished normally."""


@dataclass(frozen=True)
class StreamFailure:
    """The provider failed after the stream was opened."""

    error: BaseException


TokenEvent = TokenChunk | StreamEnd | StreamFailure


class CompletionProvider(Protocol):
    """Anything that can turn a prompt into a stream of token events."""

    def stream(self, messages: Sequence[Message]) -> AsyncGenerator[TokenEvent]: ...


def to_agno_messages(messages: Sequence[Message]) -> list[AgnoMessage]:
    """Map protocol messages onto agno's chat roles."""
    return [AgnoMessage(role=_AGNO_ROLES[m.role], content=m.text) for m in messages]


class AgnoCompletionProvider:
    """Completion provider streaming from an OpenAI-compatible model via agno."""

    def __init__(self, config: AgentConfig | None = None) -> None:
        """Initialize the provider.

        Args:
            config: Optional provider configuration.
                    Loads from environment if not provided.
        """
        self._config = config or get_agent_config()

    def _create_model(self) -> OpenAIChat:
        return OpenAIChat(
            id=self._config.model_name,
            api_key=self._config.api_key,
            base_url=self._config.base_url,
            temperature=self._config.temperature,
            max_tokens=self._config.max_tokens,
            max_retries=self._config.max_retries,
        )

    def _create_agent(self) -> Agent:
        # The prompt already carries its own system message; the agent adds nothing.
        return Agent(
            model=self._create_model(),
            markdown=False,
            telemetry=False,
        )

    async def stream(self, messages: Sequence[Message]) -> AsyncGenerator[TokenEvent]:
        """Stream token events for a fully built prompt.

        Args:
            messages: System message, history and new prompt, in order.

        Yields:
            ``TokenChunk`` per non-empty content fragment, then a single
            ``StreamEnd`` or ``StreamFailure``.
        """
        agent = self._create_agent()
        logger.debug(f"Opening provider stream with {len(messages)} messages")

        try:
            async for chunk in agent.arun(to_agno_messages(messages), stream=True):
                event = getattr(chunk, "event", None)
                if event == RunEvent.run_error:
                    error = RuntimeError(getattr(chunk, "content", None) or "Provider run failed")
                    logger.error(f"Provider reported an error: {error}")
                    yield StreamFailure(error)
                    return
                if event == RunEvent.run_content and chunk.content:
                    yield TokenChunk(str(chunk.content))
        except Exception as e:
            logger.error(f"Provider stream failed: {e}")
            yield StreamFailure(e)
            return

        yield StreamEnd()
