"""Completion provider integration.

Wraps an OpenAI-compatible model behind a token-event stream so the relay can
forward tokens with a single loop.

Responsibilities:
    - Provider configuration from environment
    - Role mapping from the message protocol onto agno chat roles
    - Normalizing provider output into token, end and failure events

Leverages the agno framework for model access and retries.
Maintains clean separation from the HTTP layer.
"""

from streamchat.agent.config import AgentConfig, get_agent_config
from streamchat.agent.provider import (
    AgnoCompletionProvider,
    CompletionProvider,
    StreamEnd,
    StreamFailure,
    TokenChunk,
    TokenEvent,
)

__all__ = [
    "AgentConfig",
    "AgnoCompletionProvider",
    "CompletionProvider",
    "StreamEnd",
    "StreamFailure",
    "TokenChunk",
    "TokenEvent",
    "get_agent_config",
]
