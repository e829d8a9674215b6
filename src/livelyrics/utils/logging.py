"""Logging configuration for livelyrics."""

import logging
import sys
from pathlib import Path
from typing import Optional

# Third-party loggers that chatter at INFO/DEBUG during every fetch
QUIET_LOGGERS = ("syncedlyrics", "urllib3", "aiohttp", "asyncio")


def setup_logging(
    level: str = "INFO", log_file: Optional[Path] = None, verbose: bool = False
) -> logging.Logger:
    """Configure the ``livelyrics`` logger.

    Console output goes to stderr; stdout carries lyric lines in ``follow``
    and ``fetch``.
    """
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger = logging.getLogger("livelyrics")
    logger.setLevel(getattr(logging, level.upper()))
    logger.handlers.clear()

    if verbose:
        formatter = logging.Formatter(
            "%(asctime)s %(name)s [%(levelname)s] %(message)s", datefmt="%H:%M:%S"
        )
    else:
        formatter = logging.Formatter("%(levelname)s: %(message)s")

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        # Files always get timestamps
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(name)s [%(levelname)s] %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = "livelyrics") -> logging.Logger:
    """Get logger instance."""
    return logging.getLogger(name)
