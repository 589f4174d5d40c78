"""Logging and exceptions shared by every sessionizer module.

Everything goes to ~/.sessionizer/sessionizer.log, never to the terminal,
so the picker output stays clean:

- ERROR: zoxide or tmux failures, directories skipped for lack of a name
- WARNING: stale snapshots kept, bad option values, duplicate sessions
- INFO: actions taken and selections rejected
- DEBUG: parsing and reconciliation detail
"""

import logging
from pathlib import Path

# Shared with the other sessionizer data
LOG_DIR = Path.home() / ".sessionizer"
LOG_FILE = LOG_DIR / "sessionizer.log"


def get_logger(name: str) -> logging.Logger:
    """Get a configured logger instance.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Returns:
        Configured logger that writes to the sessionizer log file
    """
    logger = logging.getLogger(name)

    # Modules call this at import time; attach the handler once
    if not logger.handlers:
        logger.setLevel(logging.DEBUG)

        LOG_DIR.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(LOG_FILE)
        file_handler.setLevel(logging.DEBUG)
        file_formatter = logging.Formatter(
            "%(asctime)s | %(name)s | %(levelname)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)

    return logger


class SessionizerError(Exception):
    """Base exception for sessionizer errors."""

    pass


class TmuxError(SessionizerError):
    """Error related to tmux operations."""

    pass


class FeedUnavailableError(SessionizerError):
    """The directory ranking store or session lister produced nothing usable."""

    pass


class NameResolutionError(SessionizerError):
    """No unique name could be found for a path within the attempt bound."""

    pass


class SelectionRejected(SessionizerError):
    """A user-triggered action was refused; the picker state is unchanged."""

    pass


class LayoutRequiredError(SelectionRejected):
    """Quick-create was requested but no default layout is configured."""

    pass


class InvalidSessionNameError(SelectionRejected):
    """The derived session name cannot be used by the multiplexer."""

    pass
