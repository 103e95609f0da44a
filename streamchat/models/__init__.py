"""Pydantic models for the message protocol shared by relay and controller.

Models:
    - Role: Speaker identifier (human, ai, or system)
    - Message: Individual message in the conversation log
    - RelayRequest: Incoming relay request payload
"""

from streamchat.models.schemas import Message, RelayRequest, Role

__all__ = ["Message", "RelayRequest", "Role"]
