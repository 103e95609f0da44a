from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    """Speaker of a conversation message."""

    HUMAN = "human"
    AI = "ai"
    SYSTEM = "system"


class Message(BaseModel):
    """A single message in the conversation log.

    On the wire the role travels under the ``name`` key, e.g.
    ``{"name": "human", "text": "hi"}``.

    Attributes:
        role: Who produced the message (human, ai, or system).
        text: The message text.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    role: Role = Field(..., alias="name")
    text: str

    def to_wire(self) -> dict[str, str]:
        """Serialize using the wire field names."""
        return self.model_dump(mode="json", by_alias=True)


class RelayRequest(BaseModel):
    """Request payload for the streaming relay endpoint.

    Attributes:
        messages: Prior conversation, oldest first.
        prompt: The new human prompt.
    """

    messages: list[Message] = Field(default_factory=list)
    prompt: str
