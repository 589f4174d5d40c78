"""Configuration constants and the immutable picker configuration."""

import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .logging_config import get_logger

logger = get_logger(__name__)

# Base directory for all sessionizer data
DATA_DIR = Path.home() / ".sessionizer"

# Directory ranking store
ZOXIDE_COMMAND = ["zoxide", "query", "--list", "--score"]
ZOXIDE_TIMEOUT_SECONDS = 5

# tmux-resurrect save files, first existing one wins
RESURRECT_FILES = [
    Path.home() / ".local" / "share" / "tmux" / "resurrect" / "last",
    Path.home() / ".tmux" / "resurrect" / "last",
]

# Session names must be shorter than this many bytes
MAX_SESSION_NAME_BYTES = 108

DEFAULT_SEPARATOR = "."

TRUE_VALUES = {"true", "yes", "on", "1"}
FALSE_VALUES = {"false", "no", "off", "0"}


def normalize_path(path: str) -> str:
    """Strip trailing slashes, keeping the filesystem root intact."""
    stripped = path.rstrip("/")
    return stripped or path[:1]


class Config(BaseModel):
    """Picker configuration, loaded once from host options and never mutated."""

    model_config = ConfigDict(frozen=True)

    separator: str = DEFAULT_SEPARATOR
    base_paths: tuple[str, ...] = Field(default_factory=tuple)
    show_resurrectable: bool = False
    default_layout: str | None = None

    @field_validator("separator")
    @classmethod
    def _separator_not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("separator must not be empty")
        return v

    @field_validator("base_paths")
    @classmethod
    def _base_paths_absolute(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        for path in v:
            if not path.startswith("/"):
                raise ValueError(f"base path must be absolute: {path!r}")
        return tuple(normalize_path(p) for p in v)

    @classmethod
    def from_options(cls, options: Mapping[str, str]) -> "Config":
        """Build configuration from the host's raw key/value options.

        Invalid values fall back to that option's default and are logged;
        this never raises.
        """
        known = {
            "session_separator",
            "base_paths",
            "show_resurrectable_sessions",
            "default_layout",
        }
        for key in options:
            if key not in known:
                logger.debug(f"Ignoring unknown option {key!r}")

        separator = options.get("session_separator", DEFAULT_SEPARATOR)
        if not separator:
            logger.warning(
                f"Empty session_separator, using default {DEFAULT_SEPARATOR!r}"
            )
            separator = DEFAULT_SEPARATOR

        return cls(
            separator=separator,
            base_paths=_parse_base_paths(options.get("base_paths", "")),
            show_resurrectable=_parse_bool(
                "show_resurrectable_sessions",
                options.get("show_resurrectable_sessions"),
                default=False,
            ),
            default_layout=options.get("default_layout") or None,
        )


def _parse_base_paths(raw: str) -> tuple[str, ...]:
    """Split a pipe-delimited list, dropping entries that are not absolute."""
    paths: list[str] = []
    for entry in raw.split("|"):
        entry = entry.strip()
        if not entry:
            continue
        expanded = os.path.expanduser(entry)
        if not expanded.startswith("/"):
            logger.warning(f"Ignoring malformed base path {entry!r}")
            continue
        normalized = normalize_path(expanded)
        if normalized not in paths:
            paths.append(normalized)
    return tuple(paths)


def _parse_bool(key: str, raw: str | None, default: bool) -> bool:
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    logger.warning(f"Invalid boolean for {key}: {raw!r}, using default {default}")
    return default
