"""Relay configuration.

Holds the shared bearer secret checked on every relay request. Built once at
startup and handed to the application factory.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

load_dotenv()


class RelayConfig(BaseModel):
    """Configuration consumed by the stream relay.

    Attributes:
        api_key: Static bearer token clients must present.
    """

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(
        default_factory=lambda: os.getenv("RELAY_API_KEY", ""),
        description="Bearer token required on relay requests",
    )

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Reject blank bearer secrets."""
        if not v or not v.strip():
            raise ValueError("Relay API key required. Set RELAY_API_KEY in .env")
        return v.strip()


def get_relay_config() -> RelayConfig:
    """Create relay configuration from environment.

    Raises:
        ValueError: If RELAY_API_KEY is not set.
    """
    return RelayConfig()
