"""
Logging setup — rich handler on the `hardener` logger, writing to stderr.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

_LOGGER_NAME = "hardener"


def setup_logging(level: str = "WARNING", console: Console | None = None) -> logging.Logger:
    """
    Attach a RichHandler to the package logger and set its level.

    Safe to call more than once; the previous handler is replaced.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
    logger.propagate = False
    return logger


def verbosity_to_level(verbose: int, default: str = "WARNING") -> str:
    """-v → INFO, -vv → DEBUG; no flag keeps the configured level."""
    if verbose >= 2:
        return "DEBUG"
    if verbose == 1:
        return "INFO"
    return default
