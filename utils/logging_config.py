"""Logging configuration for invoice analysis."""

import logging
import sys
from pathlib import Path

from config import Config


def setup_logging(
    log_file: str | None = None,
    log_level: str | None = None,
    console_level: str = "INFO",
) -> None:
    """
    Configure application logging with console and file handlers.

    Args:
        log_file: Path to log file (defaults to Config.LOG_FILE)
        log_level: Root logging level (defaults to Config.LOG_LEVEL)
        console_level: Level for the stdout handler
    """
    log_file = log_file or Config.LOG_FILE
    log_level = log_level or Config.LOG_LEVEL

    logger = logging.getLogger()
    logger.setLevel(getattr(logging, log_level.upper()))
    logger.handlers.clear()

    # Short format on the console, it shares the terminal with tqdm bars
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, console_level.upper()))
    console_handler.setFormatter(
        logging.Formatter("%(asctime)s - %(levelname)s - %(message)s", datefmt="%H:%M:%S")
    )
    logger.addHandler(console_handler)

    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"
        )
    )
    logger.addHandler(file_handler)

    logger.debug(f"Logging initialized (level={log_level}, file={log_path})")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the specified name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
