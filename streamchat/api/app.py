"""FastAPI application factory and configuration.

Main application entry point with lifespan management, middleware,
and router registration.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from streamchat import __version__
from streamchat.agent.provider import AgnoCompletionProvider, CompletionProvider
from streamchat.api.relay import router as relay_router
from streamchat.config import RelayConfig, get_relay_config

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application startup and shutdown lifecycle.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application while it runs.
    """
    logger.info("Starting StreamChat relay...")
    yield
    logger.info("Shutting down StreamChat relay...")


def create_app(
    config: RelayConfig | None = None,
    provider: CompletionProvider | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Configuration and provider are built once here and shared read-only by
    every request.

    Args:
        config: Relay configuration. Loads from environment if not provided.
        provider: Completion provider. Defaults to the agno-backed provider
                  configured from environment.

    Returns:
        Configured FastAPI application instance.
    """
    application = FastAPI(
        title="StreamChat Relay API",
        description=(
            "Streaming chat relay. Replays a client-held conversation to an LLM "
            "provider and streams the reply back token by token."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    application.state.config = config or get_relay_config()
    application.state.provider = provider or AgnoCompletionProvider()

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["*"],
    )

    application.include_router(relay_router)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Check service health status."""
        return {"status": "healthy", "service": "streamchat"}

    return application
