"""Request dependencies for the relay: configuration, provider, bearer check."""

import secrets

from fastapi import Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from streamchat.agent.provider import CompletionProvider
from streamchat.config import RelayConfig

# auto_error=False so a missing header reaches the route and gets the plain-text 401
bearer_scheme = HTTPBearer(auto_error=False)


def get_relay_config(request: Request) -> RelayConfig:
    return request.app.state.config


def get_provider(request: Request) -> CompletionProvider:
    return request.app.state.provider


def is_authorized(
    credentials: HTTPAuthorizationCredentials | None,
    config: RelayConfig,
) -> bool:
    """Check a bearer credential against the configured secret.

    Args:
        credentials: Parsed Authorization header, None if absent or not Bearer.
        config: Relay configuration holding the secret.

    Returns:
        True when the token matches exactly.
    """
    if credentials is None:
        return False
    return secrets.compare_digest(
        credentials.credentials.encode("utf-8"),
        config.api_key.encode("utf-8"),
    )
