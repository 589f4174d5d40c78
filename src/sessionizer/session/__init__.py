"""Session snapshots."""

from .registry import SessionRegistry, parse_resurrect_file

__all__ = ["SessionRegistry", "parse_resurrect_file"]
