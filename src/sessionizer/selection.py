"""Picker interaction modes and the reducer that drives them.

The machine is a pure function of (state, event, candidates, live session
names). It never holds state of its own between events; the host keeps the
returned SelectionState and feeds it back with the next event.
"""

from collections.abc import Collection, Sequence

from pydantic import BaseModel, ConfigDict, Field

from .config import Config
from .logging_config import LayoutRequiredError, SelectionRejected, get_logger
from .models import Action, Candidate, CreateSession, KillSession, SwitchTo
from .naming import creation_name
from .search import search

logger = get_logger(__name__)


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# Modes


class Browsing(_Frozen):
    """Unfiltered list in default order."""


class FilterText(_Frozen):
    """List filtered by a non-empty query."""

    query: str


class ChoosingLayout(_Frozen):
    """A candidate needs a new session; waiting for a layout."""

    candidate: Candidate
    query: str = ""


class ConfirmingKill(_Frozen):
    """Waiting for confirmation before killing a candidate's session."""

    candidate: Candidate
    query: str = ""


Mode = Browsing | FilterText | ChoosingLayout | ConfirmingKill


class SelectionState(_Frozen):
    """Everything the picker remembers between events."""

    mode: Mode = Field(default_factory=Browsing)
    highlighted_index: int = 0

    @property
    def query(self) -> str:
        if isinstance(self.mode, Browsing):
            return ""
        return self.mode.query


# Events


class TextInput(_Frozen):
    text: str


class Backspace(_Frozen):
    pass


class MoveUp(_Frozen):
    pass


class MoveDown(_Frozen):
    pass


class Confirm(_Frozen):
    pass


class QuickCreate(_Frozen):
    """Create straight away with the configured default layout."""


class LayoutChosen(_Frozen):
    layout: str | None = None


class Cancel(_Frozen):
    pass


class Kill(_Frozen):
    pass


Event = (
    TextInput
    | Backspace
    | MoveUp
    | MoveDown
    | Confirm
    | QuickCreate
    | LayoutChosen
    | Cancel
    | Kill
)


class Transition(_Frozen):
    """Result of one event: the next state and what the host should do."""

    state: SelectionState
    action: Action | None = None
    exit: bool = False


class SelectionStateMachine:
    """Maps input events to state changes and actions."""

    def __init__(self, config: Config):
        self.config = config

    def results(
        self, state: SelectionState, candidates: Sequence[Candidate]
    ) -> list[tuple[Candidate, float]]:
        """Candidates visible in the list for the current query."""
        return search(candidates, state.query)

    def highlighted(
        self, state: SelectionState, candidates: Sequence[Candidate]
    ) -> Candidate | None:
        results = self.results(state, candidates)
        if 0 <= state.highlighted_index < len(results):
            return results[state.highlighted_index][0]
        return None

    def clamp(self, state: SelectionState, candidates: Sequence[Candidate]) -> SelectionState:
        """Keep the highlight inside the result list after candidates change."""
        count = len(self.results(state, candidates))
        index = min(state.highlighted_index, max(count - 1, 0))
        if index == state.highlighted_index:
            return state
        return state.model_copy(update={"highlighted_index": index})

    def reduce(
        self,
        state: SelectionState,
        event: Event,
        candidates: Sequence[Candidate],
        live_names: Collection[str] = (),
    ) -> Transition:
        """Apply one event.

        `live_names` are running session names a new session must not reuse,
        on top of those linked from `candidates`.

        Raises:
            SelectionRejected: the user asked for an action that cannot be
                performed; the caller should keep `state` unchanged
        """
        if isinstance(event, Cancel):
            if isinstance(state.mode, Browsing):
                return Transition(state=state, exit=True)
            return Transition(state=SelectionState())

        if isinstance(state.mode, ChoosingLayout):
            return self._choosing_layout(state, state.mode, event, candidates, live_names)
        if isinstance(state.mode, ConfirmingKill):
            return self._confirming_kill(state, state.mode, event)
        return self._browsing(state, event, candidates, live_names)

    def _browsing(
        self,
        state: SelectionState,
        event: Event,
        candidates: Sequence[Candidate],
        live_names: Collection[str],
    ) -> Transition:
        if isinstance(event, TextInput):
            if not event.text:
                return Transition(state=state)
            return Transition(state=_filtered(state.query + event.text))

        if isinstance(event, Backspace):
            if not state.query:
                return Transition(state=state)
            return Transition(state=_filtered(state.query[:-1]))

        if isinstance(event, (MoveUp, MoveDown)):
            count = len(self.results(state, candidates))
            if count == 0:
                return Transition(state=state)
            step = -1 if isinstance(event, MoveUp) else 1
            index = (state.highlighted_index + step) % count
            return Transition(state=state.model_copy(update={"highlighted_index": index}))

        candidate = self.highlighted(state, candidates)

        if isinstance(event, Confirm):
            if candidate is None:
                return Transition(state=state)
            if candidate.switches:
                return self._switch(candidate)
            mode = ChoosingLayout(candidate=candidate, query=state.query)
            return Transition(state=state.model_copy(update={"mode": mode}))

        if isinstance(event, QuickCreate):
            if candidate is None:
                raise SelectionRejected("Please select a directory")
            if candidate.switches:
                return self._switch(candidate)
            return self._create(candidate, self._default_layout(), candidates, live_names)

        if isinstance(event, Kill):
            if candidate is None or candidate.session_link is None:
                return Transition(state=state)
            mode = ConfirmingKill(candidate=candidate, query=state.query)
            return Transition(state=state.model_copy(update={"mode": mode}))

        return Transition(state=state)

    def _choosing_layout(
        self,
        state: SelectionState,
        mode: ChoosingLayout,
        event: Event,
        candidates: Sequence[Candidate],
        live_names: Collection[str],
    ) -> Transition:
        if isinstance(event, LayoutChosen):
            return self._create(mode.candidate, event.layout, candidates, live_names)
        if isinstance(event, Confirm):
            return self._create(mode.candidate, None, candidates, live_names)
        if isinstance(event, QuickCreate):
            return self._create(mode.candidate, self._default_layout(), candidates, live_names)
        return Transition(state=state)

    def _confirming_kill(
        self, state: SelectionState, mode: ConfirmingKill, event: Event
    ) -> Transition:
        if not isinstance(event, Confirm):
            return Transition(state=state)
        session = mode.candidate.session_link
        logger.info(f"Kill confirmed for session {session.name!r}")
        return Transition(
            state=_filtered(mode.query),
            action=KillSession(
                session_name=session.name,
                resurrectable=not session.status.is_live,
            ),
        )

    def _switch(self, candidate: Candidate) -> Transition:
        return Transition(
            state=SelectionState(),
            action=SwitchTo(session_name=candidate.session_link.name),
        )

    def _create(
        self,
        candidate: Candidate,
        layout: str | None,
        candidates: Sequence[Candidate],
        live_names: Collection[str],
    ) -> Transition:
        taken = set(live_names)
        taken.update(
            c.session_link.name
            for c in candidates
            if c.session_link is not None and c.session_link.status.is_live
        )
        name = creation_name(candidate, self.config.separator, taken)
        cwd = candidate.source_path
        if cwd is None and candidate.session_link is not None:
            cwd = candidate.session_link.working_dir
        return Transition(
            state=SelectionState(),
            action=CreateSession(name=name, cwd=cwd, layout=layout),
        )

    def _default_layout(self) -> str:
        if self.config.default_layout is None:
            raise LayoutRequiredError("No default layout configured for quick create")
        return self.config.default_layout


def _filtered(query: str) -> SelectionState:
    if query:
        return SelectionState(mode=FilterText(query=query))
    return SelectionState()
