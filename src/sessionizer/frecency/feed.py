"""Ranking store feed backed by the zoxide CLI."""

import subprocess

from ..config import ZOXIDE_COMMAND, ZOXIDE_TIMEOUT_SECONDS
from ..logging_config import FeedUnavailableError, get_logger
from ..models import DirectoryEntry
from .index import parse_zoxide_output

logger = get_logger(__name__)


class ZoxideFeed:
    """Fetches one snapshot of ranked directories per call."""

    def __init__(self, command: list[str] | None = None, timeout: int = ZOXIDE_TIMEOUT_SECONDS):
        self.command = command or ZOXIDE_COMMAND
        self.timeout = timeout

    def fetch(self) -> list[DirectoryEntry]:
        """Run zoxide and return its directories.

        Raises:
            FeedUnavailableError: zoxide is missing, timed out or failed
        """
        try:
            result = subprocess.run(
                self.command,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            logger.error(f"zoxide not found: {e}")
            raise FeedUnavailableError("zoxide not found (is it installed?)") from e
        except subprocess.TimeoutExpired as e:
            logger.warning(f"zoxide query timed out after {self.timeout}s")
            raise FeedUnavailableError("zoxide query timed out") from e

        if result.returncode != 0:
            logger.error(f"zoxide exited with {result.returncode}: {result.stderr.strip()}")
            raise FeedUnavailableError(f"Failed to run zoxide: {result.stderr.strip()}")

        entries = parse_zoxide_output(result.stdout)
        logger.debug(f"Fetched {len(entries)} directories from zoxide")
        return entries
