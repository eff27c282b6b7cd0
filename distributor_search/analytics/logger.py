"""Application logging."""

import logging
import sys
from pathlib import Path
from typing import Optional
from distributor_search.utils.config import settings

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"

# httpx logs every request at INFO; supplier feeds are polled often
NOISY_LOGGERS = ("httpx", "httpcore")


def setup_logger(
    name: str = "distributor_search", log_file: Optional[str] = None, log_level: str = "INFO"
) -> logging.Logger:
    """Configure the shared application logger (stdout plus optional file)."""
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, log_level.upper()))
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)

    for noisy in NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(logging.WARNING)

    return logger


# Global logger instance
logger = setup_logger(log_file=settings.log_file, log_level=settings.log_level)
