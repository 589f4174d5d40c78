"""Tmux session lister and action sink using libtmux."""

import os
from pathlib import Path

import libtmux

from ..config import RESURRECT_FILES
from ..logging_config import FeedUnavailableError, TmuxError, get_logger
from ..models import Action, CreateSession, KillSession, SessionRecord, SessionStatus, SwitchTo
from ..session.registry import parse_resurrect_file

logger = get_logger(__name__)


class TmuxController:
    """Reads tmux sessions for the picker and performs its actions."""

    def __init__(self, resurrect_files: list[Path] | None = None):
        self._server: libtmux.Server | None = None
        self.resurrect_files = resurrect_files or RESURRECT_FILES

    @property
    def server(self) -> libtmux.Server:
        """Get or create the tmux server connection."""
        if self._server is None:
            try:
                self._server = libtmux.Server()
            except Exception as e:
                logger.error(f"Failed to connect to tmux server: {e}")
                raise TmuxError(f"Cannot connect to tmux server: {e}") from e
        return self._server

    @staticmethod
    def inside_tmux() -> bool:
        return bool(os.environ.get("TMUX"))

    def current_session_name(self) -> str | None:
        """Name of the session this client is attached to, if inside tmux."""
        if not self.inside_tmux():
            return None
        try:
            result = self.server.cmd("display-message", "-p", "#{session_name}")
            if result.stdout:
                return result.stdout[0].strip() or None
            return None
        except Exception as e:
            logger.warning(f"Could not determine current session: {e}")
            return None

    def list_session_records(self) -> list[SessionRecord]:
        """Live sessions, the attached one marked current.

        Raises:
            FeedUnavailableError: tmux could not be queried
        """
        try:
            sessions = list(self.server.sessions)
        except Exception as e:
            logger.error(f"Error listing tmux sessions: {e}")
            raise FeedUnavailableError(f"Cannot list tmux sessions: {e}") from e

        current = self.current_session_name()
        records = []
        for session in sessions:
            if not session.name:
                continue
            status = SessionStatus.CURRENT if session.name == current else SessionStatus.ACTIVE
            records.append(
                SessionRecord(
                    name=session.name,
                    status=status,
                    working_dir=session.session_path or None,
                )
            )
        logger.debug(f"Listed {len(records)} tmux sessions (current: {current})")
        return records

    def list_resurrectable_records(self) -> list[SessionRecord]:
        """Sessions saved by tmux-resurrect; empty if no save file exists.

        Raises:
            FeedUnavailableError: the save file exists but cannot be read
        """
        for path in self.resurrect_files:
            if not path.exists():
                continue
            try:
                content = path.read_text()
            except OSError as e:
                logger.error(f"Failed to read resurrect file {path}: {e}")
                raise FeedUnavailableError(f"Cannot read {path}: {e}") from e
            records = parse_resurrect_file(content)
            logger.debug(f"Loaded {len(records)} resurrectable sessions from {path}")
            return records
        return []

    def list_all_records(self, include_resurrectable: bool = False) -> list[SessionRecord]:
        """Live sessions plus, when asked, resurrectable ones."""
        records = self.list_session_records()
        if include_resurrectable:
            records.extend(self.list_resurrectable_records())
        return records

    def apply(self, action: Action) -> None:
        """Perform an action produced by the picker.

        Raises:
            TmuxError: tmux refused the action
        """
        if isinstance(action, SwitchTo):
            self.switch_to(action.session_name)
        elif isinstance(action, CreateSession):
            self.create_session(action.name, action.cwd, action.layout)
        elif isinstance(action, KillSession):
            if action.resurrectable:
                if not self.forget_resurrectable(action.session_name):
                    raise TmuxError(f"No saved session named '{action.session_name}'")
            elif not self.kill_session(action.session_name):
                raise TmuxError(f"No running session named '{action.session_name}'")

    def switch_to(self, name: str) -> None:
        """Switch the attached client to another session."""
        if not self.inside_tmux():
            raise TmuxError(f"Not inside tmux; attach with: tmux attach -t '{name}'")
        try:
            result = self.server.cmd("switch-client", "-t", name)
        except Exception as e:
            logger.error(f"Failed to switch to '{name}': {e}")
            raise TmuxError(f"Failed to switch to '{name}': {e}") from e
        if result.stderr:
            message = " ".join(result.stderr)
            logger.error(f"tmux switch-client to '{name}' failed: {message}")
            raise TmuxError(f"Failed to switch to '{name}': {message}")
        logger.info(f"Switched to tmux session '{name}'")

    def create_session(
        self,
        name: str,
        working_dir: str | None = None,
        layout: str | None = None,
    ) -> libtmux.Session:
        """Create a detached session, apply a layout, then switch to it."""
        try:
            session = self.server.new_session(
                session_name=name,
                start_directory=working_dir,
                attach=False,
            )
            logger.info(f"Created tmux session '{name}' in {working_dir}")
        except Exception as e:
            logger.error(f"Failed to create tmux session '{name}': {e}")
            raise TmuxError(f"Failed to create session '{name}': {e}") from e

        if layout:
            try:
                session.active_window.select_layout(layout)
            except Exception as e:
                logger.error(f"Failed to apply layout '{layout}' to '{name}': {e}")
                raise TmuxError(f"Invalid layout '{layout}': {e}") from e

        if self.inside_tmux():
            self.switch_to(name)
        return session

    def kill_session(self, name: str) -> bool:
        """Kill a tmux session by name."""
        try:
            session = self.server.sessions.get(session_name=name, default=None)
            if session:
                session.kill()
                logger.info(f"Killed tmux session '{name}'")
                return True
            logger.warning(f"Session '{name}' not running, nothing to kill")
            return False
        except Exception as e:
            logger.warning(f"Error killing session '{name}': {e}")
            return False

    def forget_resurrectable(self, name: str) -> bool:
        """Remove a saved session from the tmux-resurrect save file.

        Returns False if no save file mentions the session.

        Raises:
            TmuxError: the save file could not be rewritten
        """
        for path in self.resurrect_files:
            if not path.exists():
                continue
            try:
                lines = path.read_text().splitlines(keepends=True)
                kept = [line for line in lines if not _saved_line_for(line, name)]
                if len(kept) == len(lines):
                    logger.warning(f"Session '{name}' not in {path}, nothing to forget")
                    return False
                path.write_text("".join(kept))
            except OSError as e:
                logger.error(f"Failed to update resurrect file {path}: {e}")
                raise TmuxError(f"Cannot update {path}: {e}") from e
            logger.info(f"Forgot saved session '{name}' in {path}")
            return True
        return False


def _saved_line_for(line: str, name: str) -> bool:
    """True for the pane and window lines belonging to session `name`."""
    fields = line.split("\t")
    return len(fields) > 1 and fields[0] in ("pane", "window") and fields[1] == name
