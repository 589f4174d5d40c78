"""Jump to or create multiplexer sessions from a frecency-ranked directory history."""

from .config import Config
from .models import (
    Candidate,
    CreateSession,
    DirectoryCandidate,
    DirectoryEntry,
    KillSession,
    LinkedCandidate,
    SessionCandidate,
    SessionRecord,
    SessionStatus,
    SwitchTo,
)
from .naming import resolve
from .picker import Picker
from .reconcile import reconcile
from .search import search

__version__ = "0.1.0"

__all__ = [
    "Config",
    "Candidate",
    "CreateSession",
    "DirectoryCandidate",
    "DirectoryEntry",
    "KillSession",
    "LinkedCandidate",
    "Picker",
    "SessionCandidate",
    "SessionRecord",
    "SessionStatus",
    "SwitchTo",
    "reconcile",
    "resolve",
    "search",
]
