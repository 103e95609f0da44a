"""Main application entry point.

Runs FastAPI (port 8000) with NiceGUI mounted for the chat interface.
Environment variables are loaded from .env file.
"""

import logging
import os
import sys

from dotenv import load_dotenv

# Load environment variables before any other imports that might need them
load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


def run_integrated() -> None:
    """Run the relay with NiceGUI mounted on the same server.

    FastAPI handles the relay, NiceGUI handles the UI.
    Both accessible on port 8000.
    """
    import uvicorn
    from nicegui import ui

    from streamchat.agent.config import get_agent_config
    from streamchat.agent.provider import AgnoCompletionProvider
    from streamchat.api.app import create_app
    from streamchat.config import get_relay_config
    from streamchat.ui.chat_page import chat_page  # noqa: F401 - Registers the page

    app = create_app(
        config=get_relay_config(),
        provider=AgnoCompletionProvider(get_agent_config()),
    )

    ui.run_with(
        app,
        title="StreamChat",
        favicon="💬",
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "streamchat-secret"),
    )

    logger.info("Starting integrated server on http://localhost:8000")
    logger.info("API docs available at http://localhost:8000/docs")
    logger.info("Chat UI available at http://localhost:8000/")

    uvicorn.run(
        app,
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


def run_separate() -> None:
    """Run the relay and NiceGUI as separate servers.

    FastAPI on port 8000, NiceGUI on port 8080.
    The UI reaches the relay through API_BASE_URL.
    """
    import asyncio
    import subprocess

    async def run_servers() -> None:
        logger.info("Starting relay on http://localhost:8000")
        logger.info("Starting NiceGUI on http://localhost:8080")

        relay_proc = subprocess.Popen(
            [
                sys.executable,
                "-m",
                "uvicorn",
                "streamchat.api.app:create_app",
                "--factory",
                "--host",
                os.getenv("HOST", "0.0.0.0"),
                "--port",
                "8000",
            ]
        )

        ui_proc = subprocess.Popen(
            [sys.executable, "-c", "from streamchat.ui.chat_page import main; main()"]
        )

        try:
            while True:
                await asyncio.sleep(1)
                if relay_proc.poll() is not None or ui_proc.poll() is not None:
                    break
        except KeyboardInterrupt:
            logger.info("Shutting down servers...")
        finally:
            relay_proc.terminate()
            ui_proc.terminate()
            relay_proc.wait()
            ui_proc.wait()

    asyncio.run(run_servers())


def main() -> None:
    """Application entry point.

    Set RUN_MODE=separate to run the relay and NiceGUI on different ports.
    Default is integrated mode (both on port 8000).
    """
    mode = os.getenv("RUN_MODE", "integrated").lower()

    logger.info(f"Starting StreamChat in {mode} mode")

    if mode == "separate":
        run_separate()
    else:
        run_integrated()


if __name__ == "__main__":
    main()
