"""
Logging for the dice engine.

Records go to stderr through rich, so they never mix with the sheets and
tables the command line prints on stdout.
"""

import logging
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

# Name of the engine's logger, and prefix of its children.
LOGGER_NAME = "rollforge"


def setup_logging(level: int = logging.INFO) -> None:
    """
    Routes every record through a rich handler writing to stderr.

    Args:
        level (int): The root logging level, e.g. from EngineSettings.

    """
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s", datefmt="[%X]"))
    logging.basicConfig(level=level, handlers=[handler], force=True)


def get_logger(suffix: str | None = None) -> logging.Logger:
    """
    Returns the engine logger, or one of its children.

    Args:
        suffix (str | None): Child name, e.g. "simulation".

    Returns:
        logging.Logger: "rollforge" or "rollforge.<suffix>".

    """
    return logging.getLogger(f"{LOGGER_NAME}.{suffix}" if suffix else LOGGER_NAME)


logger = get_logger()


def _with_context(message: str, context: dict[str, Any] | None) -> str:
    if not context:
        return message
    fields = ", ".join(f"{key}={value!r}" for key, value in context.items())
    return f"{message} ({fields})"


def log_info(message: str, context: dict[str, Any] | None = None) -> None:
    """Logs `message` at INFO, followed by its context fields."""
    logger.info(_with_context(message, context))


def log_debug(message: str, context: dict[str, Any] | None = None) -> None:
    """Logs `message` at DEBUG, followed by its context fields."""
    logger.debug(_with_context(message, context))
