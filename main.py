"""Run the Nagarkar API under uvicorn."""

import os
from typing import Any

import uvicorn
from loguru import logger

from nagarkar.core.config import get_settings
from nagarkar.core.logging import setup_logging

UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def uvicorn_log_config() -> dict[str, Any]:
    """Route uvicorn's stdlib loggers through loguru."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "handlers": {
            "loguru": {"class": "nagarkar.core.logging.InterceptHandler"},
        },
        "loggers": {
            name: {"handlers": ["loguru"], "level": "INFO", "propagate": False}
            for name in UVICORN_LOGGERS
        },
    }


def main() -> None:
    settings = get_settings()
    setup_logging(settings)

    # Container platforms inject the listening port
    port = int(os.environ.get("PORT", settings.api_port))
    mode = "development, auto-reload" if settings.debug else "production"
    logger.info(f"Starting Uvicorn on http://{settings.api_host}:{port} ({mode})")

    # Reload requires an import string rather than the app object
    uvicorn.run(
        "nagarkar.api.main:app",
        host=settings.api_host,
        port=port,
        reload=settings.debug,
        log_config=uvicorn_log_config(),
    )


if __name__ == "__main__":
    main()
