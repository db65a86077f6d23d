"""Structured logging configuration."""

import sys
from pathlib import Path
from typing import Any, Optional

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message} | {extra}"

# Bound context keys echoed on the console line
CONSOLE_CONTEXT_KEYS = ("url",)


def _console_format(record: dict) -> str:
    """Console format with request context appended when it is bound."""
    extra = record["extra"]
    context = " ".join(f"{key}={extra[key]}" for key in CONSOLE_CONTEXT_KEYS if extra.get(key))
    if context:
        extra["console_context"] = context
        return CONSOLE_FORMAT + " <dim>[{extra[console_context]}]</dim>\n{exception}"
    return CONSOLE_FORMAT + "\n{exception}"


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[Path] = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
) -> None:
    """
    Configure console logging and, when log_file is given, a rotating file sink.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional path to log file (LOG_FILE)
        rotation: Log rotation size (LOG_ROTATION)
        retention: Log retention period (LOG_RETENTION)
    """
    logger.remove()

    logger.add(sys.stderr, format=_console_format, level=log_level, colorize=True)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            format=FILE_FORMAT,
            level=log_level,
            rotation=rotation,
            retention=retention,
            compression="zip",
        )


def setup_logging_from_settings(settings: Any, log_level: Optional[str] = None) -> None:
    """Configure logging from Settings; log_level overrides LOG_LEVEL when given."""
    setup_logging(
        log_level=log_level or settings.log_level,
        log_file=settings.log_file,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )


def get_logger(name: str, **context: Any) -> Any:
    """
    Get a logger bound to name and optional request context.

    Args:
        name: Logger name (typically __name__)
        **context: Additional context fields (url, model, etc.)

    Returns:
        Logger instance with bound context
    """
    return logger.bind(name=name, **context)


# Initialize logging on import
setup_logging()
