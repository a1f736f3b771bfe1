"""
Logging configuration for the Tennis Picks engine.
"""
import logging
import sys
from pathlib import Path
from typing import Optional

from pythonjsonlogger.json import JsonFormatter

from tennis_picks.config import ObservabilitySettings

CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def setup_logging(
    name: str = "tennis_picks",
    level: Optional[str] = None,
    log_file: Optional[Path] = None,
    observability: Optional[ObservabilitySettings] = None,
) -> logging.Logger:
    """
    Set up logging with environment-aware configuration.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to LOG_LEVEL
        log_file: Optional file path for log output
        observability: Settings to read level/format from

    Returns:
        Configured logger instance
    """
    if observability is None:
        observability = ObservabilitySettings()
    if level is None:
        level = observability.log_level

    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))

    # Remove existing handlers to avoid duplicates
    logger.handlers = []

    use_json = (
        observability.log_format == "json"
        or observability.environment == "production"
    )

    console_handler = logging.StreamHandler(sys.stderr)

    if use_json:
        # Structured logs for aggregators
        formatter = JsonFormatter(
            fmt="%(asctime)s %(name)s %(levelname)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S"
        )
    else:
        formatter = logging.Formatter(
            fmt=CONSOLE_FORMAT,
            datefmt="%Y-%m-%d %H:%M:%S"
        )

    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
