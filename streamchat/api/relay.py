"""Streaming relay endpoint.

Accepts a replayed conversation plus a new prompt, opens one provider
session, and forwards each token to the response body as it is produced.

Once the first byte is sent the status line is committed, so failures after
that point abort the body instead of producing an error status.
"""

import asyncio
import logging
from collections.abc import AsyncGenerator, Sequence
from contextlib import aclosing

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import PlainTextResponse, StreamingResponse
from fastapi.security import HTTPAuthorizationCredentials
from pydantic import ValidationError

from streamchat.agent.provider import (
    CompletionProvider,
    StreamEnd,
    StreamFailure,
    TokenChunk,
    TokenEvent,
)
from streamchat.api.deps import bearer_scheme, get_provider, get_relay_config, is_authorized
from streamchat.config import RelayConfig
from streamchat.models.schemas import Message, RelayRequest, Role

logger = logging.getLogger(__name__)

router = APIRouter(tags=["relay"])

SYSTEM_PROMPT = "You are a friendly assistant."
UNAUTHORIZED_BODY = "Unauthorized"
MALFORMED_BODY = "Error processing request"


class ProviderStreamError(Exception):
    """Raised when the provider fails after the response has started."""

    pass


def build_prompt(history: Sequence[Message], prompt: str) -> list[Message]:
    """Assemble the messages sent to the provider.

    Args:
        history: Prior conversation, oldest first.
        prompt: The new human prompt.

    Returns:
        Fixed system message, then the history, then the prompt.
    """
    return [
        Message(role=Role.SYSTEM, text=SYSTEM_PROMPT),
        *history,
        Message(role=Role.HUMAN, text=prompt),
    ]


async def relay_tokens(events: AsyncGenerator[TokenEvent]) -> AsyncGenerator[bytes]:
    """Forward provider token events as raw response bytes.

    Each yield suspends until the server has sent the previous fragment.

    Args:
        events: Single-use token event stream from the provider.

    Yields:
        UTF-8 encoded token fragments, unframed.

    Raises:
        ProviderStreamError: If the provider fails or stops without an end marker.
    """
    forwarded = 0
    async with aclosing(events):
        try:
            async for event in events:
                match event:
                    case TokenChunk(text=text):
                        forwarded += 1
                        yield text.encode("utf-8")
                    case StreamEnd():
                        logger.info(f"Relay finished after {forwarded} tokens")
                        return
                    case StreamFailure(error=error):
                        logger.error(f"Provider failed after {forwarded} tokens: {error}")
                        raise ProviderStreamError(str(error)) from error
        except asyncio.CancelledError:
            logger.info(f"Client went away after {forwarded} tokens, stopping relay")
            raise

    logger.error(f"Provider stream ended without an end marker after {forwarded} tokens")
    raise ProviderStreamError("Provider stream ended without an end marker")


async def _parse_body(request: Request) -> RelayRequest | None:
    try:
        return RelayRequest.model_validate_json(await request.body())
    except ValidationError as e:
        logger.warning(f"Rejected malformed relay request: {e.error_count()} error(s)")
        return None


@router.post("/api", response_model=None)
async def relay(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    config: RelayConfig = Depends(get_relay_config),
    provider: CompletionProvider = Depends(get_provider),
) -> Response:
    """Stream a model reply for the given conversation.

    Body: ``{"messages": [{"name": ..., "text": ...}], "prompt": ...}``.

    Returns:
        200 ``text/event-stream`` with concatenated token fragments.

    Raises:
        401: Missing or incorrect bearer token.
        500: Malformed JSON body or unknown message role.
    """
    if not is_authorized(credentials, config):
        logger.warning("Rejected relay request with missing or invalid bearer token")
        return PlainTextResponse(UNAUTHORIZED_BODY, status_code=status.HTTP_401_UNAUTHORIZED)

    body = await _parse_body(request)
    if body is None:
        return PlainTextResponse(
            MALFORMED_BODY, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    messages = build_prompt(body.messages, body.prompt)
    logger.info(f"Relaying prompt with {len(body.messages)} history messages")

    # The provider session starts when the body is first pulled, not here.
    return StreamingResponse(
        relay_tokens(provider.stream(messages)),
        media_type="text/event-stream",
    )
