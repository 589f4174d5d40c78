"""Data models shared by the picker core."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class SessionStatus(str, Enum):
    """Relationship of a multiplexer session to the user."""

    CURRENT = "current"  # Attached right now
    ACTIVE = "active"  # Running, not attached
    RESURRECTABLE = "resurrectable"  # Terminated but recoverable

    @property
    def rank(self) -> int:
        """Richness of the status; higher wins when records compete."""
        return _STATUS_RANK[self]

    @property
    def is_live(self) -> bool:
        return self is not SessionStatus.RESURRECTABLE


_STATUS_RANK = {
    SessionStatus.CURRENT: 2,
    SessionStatus.ACTIVE: 1,
    SessionStatus.RESURRECTABLE: 0,
}


class DirectoryEntry(BaseModel):
    """A directory from the frecency ranking store."""

    model_config = ConfigDict(frozen=True)

    path: str
    score: float


class SessionRecord(BaseModel):
    """A session as reported by the session lister."""

    model_config = ConfigDict(frozen=True)

    name: str
    status: SessionStatus = SessionStatus.ACTIVE
    working_dir: str | None = None


class _Candidate(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    display_name: str
    rank_score: float = 0.0

    @property
    def source_path(self) -> str | None:
        return None

    @property
    def session_link(self) -> SessionRecord | None:
        return None

    @property
    def switches(self) -> bool:
        """True if confirming this candidate switches to a running session."""
        link = self.session_link
        return link is not None and link.status.is_live

    def search_targets(self) -> list[tuple[str, bool]]:
        """Strings to match a query against, each flagged as primary or not."""
        targets = [(self.display_name, True)]
        if self.source_path is not None:
            targets.append((self.source_path, False))
        return targets


class DirectoryCandidate(_Candidate):
    """A ranked directory with no session attached."""

    path: str

    @property
    def source_path(self) -> str | None:
        return self.path


class SessionCandidate(_Candidate):
    """A session with no tracked directory, keyed by its own name."""

    session: SessionRecord

    @property
    def session_link(self) -> SessionRecord | None:
        return self.session


class LinkedCandidate(_Candidate):
    """A ranked directory with a matching session."""

    path: str
    session: SessionRecord

    @property
    def source_path(self) -> str | None:
        return self.path

    @property
    def session_link(self) -> SessionRecord | None:
        return self.session


Candidate = DirectoryCandidate | SessionCandidate | LinkedCandidate


class SwitchTo(BaseModel):
    """Attach to an existing session."""

    model_config = ConfigDict(frozen=True)

    session_name: str

    @property
    def terminal(self) -> bool:
        return True


class CreateSession(BaseModel):
    """Create a session rooted at a directory."""

    model_config = ConfigDict(frozen=True)

    name: str
    cwd: str | None = None
    layout: str | None = None

    @property
    def terminal(self) -> bool:
        return True


class KillSession(BaseModel):
    """Terminate a running session, or forget a saved one; the picker stays open."""

    model_config = ConfigDict(frozen=True)

    session_name: str
    resurrectable: bool = False  # Only exists in the save file

    @property
    def terminal(self) -> bool:
        return False


Action = SwitchTo | CreateSession | KillSession
