"""Command-line entry point for the chat server.

Two run modes, selected with ``RUN_MODE``:

- ``integrated`` (default): one uvicorn server on ``PORT`` serving the API
  with the NiceGUI page mounted at ``/``.
- ``separate``: the API on ``PORT`` and the page on ``UI_PORT`` as two
  child processes. The page reaches the API through ``API_BASE_URL``, or
  ``http://127.0.0.1:<PORT>`` when that is unset.
"""

import logging
import os
import subprocess
import sys
import time
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class ServerSettings(BaseModel):
    """Process-level settings read from the environment.

    Attributes:
        host: Interface the API binds to.
        port: Port of the API (and of the page in integrated mode).
        ui_port: Port of the page in separate mode.
        log_level: Level name for logging and uvicorn.
        run_mode: ``integrated`` or ``separate``.
        storage_secret: Secret NiceGUI signs its browser storage with.
    """

    host: str = Field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = Field(default_factory=lambda: int(os.getenv("PORT", "8000")), ge=1, le=65535)
    ui_port: int = Field(
        default_factory=lambda: int(os.getenv("UI_PORT", "8080")), ge=1, le=65535
    )
    log_level: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())
    run_mode: Literal["integrated", "separate"] = Field(
        default_factory=lambda: os.getenv("RUN_MODE", "integrated").lower()
    )
    storage_secret: str = Field(
        default_factory=lambda: os.getenv("NICEGUI_STORAGE_SECRET", "gemini-chat-secret")
    )

    def child_env(self) -> dict[str, str]:
        """Environment for child processes, pinned to these settings."""
        env = dict(os.environ)
        env["PORT"] = str(self.port)
        env["UI_PORT"] = str(self.ui_port)
        return env


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def run_integrated(settings: ServerSettings) -> None:
    """Serve the API and the page from one uvicorn server on ``settings.port``."""
    import uvicorn
    from nicegui import ui

    from gemini_chat.api.app import create_app
    from gemini_chat.ui.chat_page import chat_page  # noqa: F401 - Registers the page

    # The page calls the API over HTTP; point it at this very server.
    os.environ["PORT"] = str(settings.port)

    app = create_app()
    ui.run_with(app, title="Gemini Chat", favicon="✦", storage_secret=settings.storage_secret)

    logger.info(f"Chat UI and API on http://localhost:{settings.port}/ (docs at /docs)")
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


def run_separate(settings: ServerSettings) -> None:
    """Run the API and the page as two child processes until either exits."""
    env = settings.child_env()
    commands = {
        "api": [
            sys.executable, "-m", "uvicorn", "gemini_chat.api.app:app",
            "--host", settings.host,
            "--port", str(settings.port),
            "--log-level", settings.log_level.lower(),
        ],
        "ui": [sys.executable, "-c", "from gemini_chat.ui.chat_page import main; main()"],
    }

    processes = {name: subprocess.Popen(cmd, env=env) for name, cmd in commands.items()}
    logger.info(f"API on port {settings.port}, UI on port {settings.ui_port}")

    try:
        while all(proc.poll() is None for proc in processes.values()):
            time.sleep(1)
        exited = [name for name, proc in processes.items() if proc.poll() is not None]
        logger.warning(f"Child process exited: {', '.join(exited)}")
    except KeyboardInterrupt:
        logger.info("Shutting down servers...")
    finally:
        for proc in processes.values():
            proc.terminate()
        for proc in processes.values():
            proc.wait()


def main() -> None:
    settings = ServerSettings()
    configure_logging(settings.log_level)
    logger.info(f"Starting Gemini Chat in {settings.run_mode} mode")

    if settings.run_mode == "separate":
        run_separate(settings)
    else:
        run_integrated(settings)


if __name__ == "__main__":
    main()
