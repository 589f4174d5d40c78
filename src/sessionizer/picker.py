"""Picker: owns the snapshots and the selection state for one interaction."""

from collections.abc import Callable, Iterable

from .config import Config
from .frecency.index import FrecencyIndex
from .logging_config import SelectionRejected, SessionizerError, get_logger
from .models import Action, Candidate, DirectoryEntry, SessionRecord
from .reconcile import reconcile
from .selection import Event, SelectionState, SelectionStateMachine
from .session.registry import SessionRegistry

logger = get_logger(__name__)


class Picker:
    """Processes one event at a time against the last known-good snapshots.

    Refreshes replace a whole snapshot; candidates are rebuilt and swapped
    in with a single assignment, so readers never see a mix of old and new.
    """

    def __init__(self, config: Config | None = None):
        self.config = config or Config()
        self.machine = SelectionStateMachine(self.config)
        self.state = SelectionState()
        self.error: str | None = None
        self.done = False
        self._directories = FrecencyIndex()
        self._sessions = SessionRegistry()
        self._candidates: tuple[Candidate, ...] = ()

    @property
    def candidates(self) -> tuple[Candidate, ...]:
        """Reconciled candidates in default browse order."""
        return self._candidates

    def results(self) -> list[tuple[Candidate, float]]:
        """Candidates matching the current filter, best first."""
        return self.machine.results(self.state, self._candidates)

    def highlighted(self) -> Candidate | None:
        return self.machine.highlighted(self.state, self._candidates)

    def refresh_directories(self, entries: Iterable[DirectoryEntry] | None) -> None:
        """Replace the directory snapshot; None keeps the previous one."""
        if entries is None:
            logger.warning("Directory feed unavailable, keeping last snapshot")
            return
        self._directories = FrecencyIndex(entries)
        self._rebuild()

    def refresh_sessions(self, records: Iterable[SessionRecord] | None) -> None:
        """Replace the session snapshot; None keeps the previous one."""
        if records is None:
            logger.warning("Session list unavailable, keeping last snapshot")
            return
        self._sessions = SessionRegistry(records)
        self._rebuild()

    def load_directories(self, fetch: Callable[[], Iterable[DirectoryEntry]]) -> None:
        """Refresh directories from a collaborator, tolerating its failure."""
        self.refresh_directories(_fetch_or_none(fetch))

    def load_sessions(self, fetch: Callable[[], Iterable[SessionRecord]]) -> None:
        """Refresh sessions from a collaborator, tolerating its failure."""
        self.refresh_sessions(_fetch_or_none(fetch))

    def handle(self, event: Event) -> Action | None:
        """Feed one input event through the selection state machine.

        Returns the action for the host to perform, if any. A rejected
        action leaves the state untouched and is kept in `error`.
        """
        if self.error is not None:
            # First key after an error only dismisses it
            self.error = None
            return None

        try:
            transition = self.machine.reduce(
                self.state, event, self._candidates, self._sessions.live_names()
            )
        except SelectionRejected as e:
            logger.info(f"Rejected {type(event).__name__}: {e}")
            self.error = str(e)
            return None

        self.state = transition.state
        if transition.exit:
            logger.debug("Picker dismissed")
            self.done = True
        if transition.action is not None:
            logger.info(f"Action: {transition.action!r}")
            self.done = transition.action.terminal
        return transition.action

    def _rebuild(self) -> None:
        candidates = tuple(reconcile(self._directories, self._sessions, self.config))
        self._candidates = candidates
        self.state = self.machine.clamp(self.state, candidates)


def _fetch_or_none(fetch: Callable[[], Iterable]) -> list | None:
    try:
        return list(fetch())
    except SessionizerError as e:
        logger.warning(f"Collaborator unavailable: {e}")
        return None
