"""Turn directory paths into unique, readable session names.

Names are resolved one path at a time against an explicit set of claimed
names. The caller owns that set and threads it through a whole pass, so
resolution order matters: feed paths in a stable order to get stable names.
"""

import re
from collections.abc import Collection, Sequence

from .config import MAX_SESSION_NAME_BYTES, normalize_path
from .logging_config import InvalidSessionNameError, NameResolutionError
from .models import Candidate

MAX_SUFFIX_ATTEMPTS = 5000

_WORD_SPLIT = re.compile(r"[-_]")


def split_segments(path: str) -> list[str]:
    """Non-empty path segments, outermost first."""
    return [s for s in path.split("/") if s]


def longest_base_path(path: str, base_paths: Sequence[str]) -> str | None:
    """The longest base path equal to `path` or a segment-aligned prefix of it."""
    best = None
    for base in base_paths:
        if path == base or path.startswith(base.rstrip("/") + "/"):
            if best is None or len(base) > len(best):
                best = base
    return best


def abbreviate_segment(segment: str) -> str:
    """Shorten a segment to its initial, or word initials for multi-word names.

    >>> abbreviate_segment("projects")
    'p'
    >>> abbreviate_segment("very-long_project")
    'v-l-p'
    """
    words = [w for w in _WORD_SPLIT.split(segment) if w]
    if len(words) > 1:
        return "-".join(w[0] for w in words)
    return segment[:1]


def next_available(name: str, separator: str, taken: Collection[str]) -> str:
    """Return `name`, or `name` + separator + the lowest free integer from 2.

    Raises:
        NameResolutionError: no free suffix within MAX_SUFFIX_ATTEMPTS
    """
    if name not in taken:
        return name
    for counter in range(2, MAX_SUFFIX_ATTEMPTS + 2):
        candidate = f"{name}{separator}{counter}"
        if candidate not in taken:
            return candidate
    raise NameResolutionError(
        f"No free name for {name!r} after {MAX_SUFFIX_ATTEMPTS} attempts"
    )


def resolve(
    path: str,
    base_paths: Sequence[str],
    separator: str,
    claimed: set[str],
) -> str:
    """Resolve the shortest unclaimed name for `path` and claim it.

    1. Strip the longest matching base path. The remainder is the shortest
       name allowed; an exact base-path match keeps the whole path.
    2. Prepend outer segments one at a time until the name is unclaimed.
    3. If every segment is used, abbreviate all but the last segment.
    4. Finally fall back to a numeric suffix on the full name.

    Args:
        path: Absolute directory path
        base_paths: Prefixes to strip, longest match wins
        separator: Joins segments in the resulting name
        claimed: Names already taken; the result is added to it

    Raises:
        NameResolutionError: the suffix search was exhausted
    """
    path = normalize_path(path) if path else path
    segments = split_segments(path)
    base = longest_base_path(path, base_paths)

    if not segments or base == path:
        name = next_available(path, separator, claimed)
        claimed.add(name)
        return name

    minimum = 1
    if base is not None:
        minimum = len(split_segments(path[len(base):]))

    for count in range(minimum, len(segments) + 1):
        name = separator.join(segments[-count:])
        if name not in claimed:
            claimed.add(name)
            return name

    full_name = separator.join(segments)
    abbreviated = separator.join(
        [abbreviate_segment(s) for s in segments[:-1]] + [segments[-1]]
    )
    if abbreviated not in claimed:
        claimed.add(abbreviated)
        return abbreviated

    name = next_available(full_name, separator, claimed)
    claimed.add(name)
    return name


def validate_session_name(name: str) -> str:
    """Check a name can be handed to the multiplexer.

    Raises:
        InvalidSessionNameError: the name is empty, too long or contains '/'
    """
    if not name:
        raise InvalidSessionNameError("Session name cannot be empty")
    if len(name.encode()) >= MAX_SESSION_NAME_BYTES:
        raise InvalidSessionNameError(
            f"Session name must be shorter than {MAX_SESSION_NAME_BYTES} bytes"
        )
    if "/" in name:
        raise InvalidSessionNameError("Session name cannot contain '/'")
    return name


def creation_name(candidate: Candidate, separator: str, taken: Collection[str]) -> str:
    """Name for the session created from `candidate`.

    A candidate that already carries a (resurrectable) session reuses that
    name. Otherwise the display name is made slash-free and incremented past
    every name in `taken`.

    Raises:
        InvalidSessionNameError: the resulting name is unusable
    """
    link = candidate.session_link
    if link is not None:
        return validate_session_name(link.name)
    base = candidate.display_name.strip("/").replace("/", separator)
    return validate_session_name(next_available(base, separator, taken))
