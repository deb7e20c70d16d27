"""
CLI entrypoint.

Initializes logging from settings, then serves the app with uvicorn.
"""

from __future__ import annotations

import logging

import uvicorn

from .config import get_settings
from .logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    level_name = str(settings.log_level).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Serving task list on http://%s:%s", settings.host, settings.port)
    # log_config=None keeps the handlers installed above
    uvicorn.run("tasklist.main:app", host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
