"""FastAPI endpoints for the streaming chat relay.

Endpoints:
    - GET /health: Service health status
    - POST /api: Stream a model reply for a replayed conversation
"""

from streamchat.api.app import create_app
from streamchat.api.relay import ProviderStreamError, build_prompt, relay_tokens

__all__ = ["ProviderStreamError", "build_prompt", "create_app", "relay_tokens"]
