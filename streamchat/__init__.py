"""StreamChat - token-by-token chat relay for a hosted LLM.

Combines FastAPI for HTTP streaming, agno for model access,
httpx for the streaming client, NiceGUI for the chat page,
and Pydantic for data validation.

Components:
    - api: Relay endpoint and application factory
    - agent: Completion provider producing token events
    - conversation: Client-side conversation state machine and read loop
    - ui: Web interface for chat interactions
    - models: Shared message protocol
"""

__version__ = "0.1.0"
