"""Logging configuration."""
import logging
import sys
from typing import Optional

from app.core.config import settings

QUIET_LOGGERS = ("httpx", "httpcore", "openai", "multipart")


def setup_logging(level: Optional[str] = None) -> None:
    """Configure application logging.

    Webhook and turn logs go to stdout; HTTP client chatter from the OpenAI
    SDK is kept at WARNING.
    """
    level_name = (level or settings.log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
