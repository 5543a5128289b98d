import logging
import sys
from typing import Optional

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(log_level: str = "INFO", log_format: Optional[str] = None) -> logging.Logger:
    """
    Configure the root logger with a single console handler.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        log_format: custom format string, DEFAULT_FORMAT when omitted

    Returns:
        The application logger
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)

    # Clear existing handlers to avoid duplicate lines on re-import (uvicorn --reload)
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(log_format or DEFAULT_FORMAT))
    root.addHandler(handler)

    configure_third_party_logging()

    logger = logging.getLogger("image_gateway")
    logger.debug(f"Logging initialized. Level: {log_level}")
    return logger


def configure_third_party_logging():
    """Reduce noise from third-party libraries"""
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)
    logging.getLogger("PIL").setLevel(logging.WARNING)
    logging.getLogger("multipart").setLevel(logging.WARNING)
