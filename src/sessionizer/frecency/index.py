"""Frecency-ranked directory snapshot."""

from collections.abc import Iterable, Iterator

from ..config import normalize_path
from ..logging_config import get_logger
from ..models import DirectoryEntry

logger = get_logger(__name__)


class FrecencyIndex:
    """Deduplicated, ordered view over one snapshot of the ranking store.

    Built once per refresh and never mutated afterwards.
    """

    def __init__(self, entries: Iterable[DirectoryEntry] = ()):
        best: dict[str, DirectoryEntry] = {}
        for entry in entries:
            path = normalize_path(entry.path)
            if not path:
                continue
            existing = best.get(path)
            # Later entry wins on an equal score
            if existing is None or entry.score >= existing.score:
                best[path] = DirectoryEntry(path=path, score=entry.score)
        self._entries = tuple(sorted(best.values(), key=lambda e: (-e.score, e.path)))
        self._paths = frozenset(best)

    def __iter__(self) -> Iterator[DirectoryEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, path: object) -> bool:
        return path in self._paths


def parse_zoxide_output(output: str) -> list[DirectoryEntry]:
    """Parse `zoxide query --list --score` output into entries.

    Each line is "<score> <path>"; blank and malformed lines are skipped.
    """
    entries = []
    for line in output.splitlines():
        line = line.strip()
        if not line:
            continue
        parts = line.split(None, 1)
        if len(parts) != 2:
            logger.debug(f"Skipping malformed zoxide line: {line!r}")
            continue
        try:
            score = float(parts[0])
        except ValueError:
            logger.debug(f"Skipping zoxide line with bad score: {line!r}")
            continue
        entries.append(DirectoryEntry(path=parts[1], score=score))
    return entries
