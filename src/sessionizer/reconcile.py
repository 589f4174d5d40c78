"""Merge ranked directories and sessions into one uniquely named list."""

from collections.abc import Iterable

from .config import Config
from .frecency.index import FrecencyIndex
from .logging_config import NameResolutionError, get_logger
from .models import (
    Candidate,
    DirectoryCandidate,
    DirectoryEntry,
    LinkedCandidate,
    SessionCandidate,
    SessionRecord,
)
from .naming import next_available, resolve
from .session.registry import SessionRegistry

logger = get_logger(__name__)

# Link priorities, lower wins
_BY_PATH = 0
_BY_NAME = 1
_BY_INCREMENTED_NAME = 2


def is_incremented_name(name: str, base: str, separator: str) -> bool:
    """True for names like "project.2" when base is "project"."""
    prefix = base + separator
    if not name.startswith(prefix):
        return False
    suffix = name[len(prefix):]
    return suffix.isdigit()


def reconcile(
    directories: FrecencyIndex | Iterable[DirectoryEntry],
    sessions: SessionRegistry | Iterable[SessionRecord],
    config: Config,
) -> list[Candidate]:
    """Build the default browse list.

    Directory-derived candidates come first in frecency order, then
    sessions with no directory in name order. Every display name is unique
    because one claim set is shared by the whole pass.
    """
    index = directories if isinstance(directories, FrecencyIndex) else FrecencyIndex(directories)
    registry = sessions if isinstance(sessions, SessionRegistry) else SessionRegistry(sessions)

    available = registry.records(include_resurrectable=config.show_resurrectable)
    unlinked = {record.name: record for record in available}

    # A session whose directory is in the index may only link by path
    path_bound = {r.name for r in available if r.working_dir in index}

    claimed: set[str] = set()
    candidates: list[Candidate] = []

    for entry in index:
        try:
            name = resolve(entry.path, config.base_paths, config.separator, claimed)
        except NameResolutionError as e:
            logger.error(f"Skipping {entry.path}: {e}")
            continue

        session = _find_link(entry.path, name, unlinked, path_bound, config.separator)
        if session is None:
            candidates.append(
                DirectoryCandidate(
                    key=entry.path,
                    display_name=name,
                    rank_score=entry.score,
                    path=entry.path,
                )
            )
        else:
            del unlinked[session.name]
            candidates.append(
                LinkedCandidate(
                    key=entry.path,
                    display_name=name,
                    rank_score=entry.score,
                    path=entry.path,
                    session=session,
                )
            )

    leftovers = sorted(unlinked.values(), key=lambda r: r.name)
    clashing = {r.name for r in leftovers if r.name in claimed}
    # Real session names are reserved so a suffix never shows as another session
    claimed.update(r.name for r in leftovers)

    for record in leftovers:
        display_name = record.name
        if record.name in clashing:
            try:
                display_name = next_available(record.name, config.separator, claimed)
            except NameResolutionError as e:
                logger.error(f"Skipping session {record.name}: {e}")
                continue
            logger.debug(f"Session {record.name!r} shown as {display_name!r}")
            claimed.add(display_name)
        candidates.append(
            SessionCandidate(key=record.name, display_name=display_name, session=record)
        )

    logger.debug(
        f"Reconciled {len(index)} directories and {len(available)} sessions "
        f"into {len(candidates)} candidates"
    )
    return candidates


def _find_link(
    path: str,
    name: str,
    unlinked: dict[str, SessionRecord],
    path_bound: set[str],
    separator: str,
) -> SessionRecord | None:
    """Pick the session to attach to a directory, if any.

    Working directory beats exact name beats incremented name; within a
    level the richest status wins, then name order.
    """
    best: tuple[int, int, str] | None = None
    chosen = None
    for record in unlinked.values():
        if record.working_dir == path:
            priority = _BY_PATH
        elif record.name in path_bound:
            continue
        elif record.name == name:
            priority = _BY_NAME
        elif is_incremented_name(record.name, name, separator):
            priority = _BY_INCREMENTED_NAME
        else:
            continue
        key = (priority, -record.status.rank, record.name)
        if best is None or key < best:
            best = key
            chosen = record
    return chosen
