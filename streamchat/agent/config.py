"""Settings for the model behind the relay.

Each relay request opens one streaming completion against an OpenAI-compatible
endpoint. These settings decide which endpoint and model are used, how replies
are sampled, and how many times the OpenAI client retries a failed call
before the relay sees a stream failure.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

load_dotenv()


def _provider_key() -> str:
    # LLM_API_KEY wins so a non-OpenAI endpoint can sit next to an OpenAI key
    return os.getenv("LLM_API_KEY", os.getenv("OPENAI_API_KEY", ""))


class AgentConfig(BaseModel):
    """Model settings for ``AgnoCompletionProvider``.

    Attributes:
        api_key: Credential for the completion endpoint (LLM_API_KEY or OPENAI_API_KEY).
        base_url: OpenAI-compatible endpoint (LLM_BASE_URL); None targets OpenAI.
        model_name: Chat model streamed from (LLM_MODEL).
        temperature: Sampling temperature for replies.
        max_tokens: Upper bound on one streamed reply.
        max_retries: Client-side retries before the relay reports a failure.
    """

    api_key: str = Field(default_factory=_provider_key)
    base_url: str | None = Field(default_factory=lambda: os.getenv("LLM_BASE_URL") or None)
    model_name: str = Field(default_factory=lambda: os.getenv("LLM_MODEL", "gpt-4o-mini"))
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=1024, ge=1, le=128000)
    max_retries: int = Field(
        default=1,
        ge=0,
        le=10,
        description="The relay itself never retries; this is the only retry budget",
    )

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Refuse to start without a provider credential."""
        if not v or not v.strip():
            raise ValueError(
                "API key required. Set LLM_API_KEY or OPENAI_API_KEY in .env"
            )
        return v.strip()


def get_agent_config() -> AgentConfig:
    """Read model settings from the environment.

    Raises:
        ValueError: If no provider API key is set.
    """
    return AgentConfig()
