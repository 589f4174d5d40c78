"""Tests for candidate reconciliation."""

from unittest.mock import patch

import pytest

from sessionizer.config import Config
from sessionizer.models import (
    DirectoryCandidate,
    DirectoryEntry,
    LinkedCandidate,
    SessionCandidate,
    SessionRecord,
    SessionStatus,
)
from sessionizer.reconcile import is_incremented_name, reconcile
from sessionizer.search import search


@pytest.fixture
def config():
    return Config(base_paths=("/home/user",))


def entry(path: str, score: float) -> DirectoryEntry:
    return DirectoryEntry(path=path, score=score)


def names(candidates) -> list[str]:
    return [c.display_name for c in candidates]


class TestDirectoryCandidates:
    """Tests for directory-only reconciliation."""

    def test_scenario_score_order(self, config):
        """Should name by base-stripped path in descending score order."""
        directories = [
            entry("/home/user/projects/foo", 10),
            entry("/home/user/projects/bar", 5),
        ]
        candidates = reconcile(directories, [], config)
        assert names(candidates) == ["projects.foo", "projects.bar"]
        assert all(isinstance(c, DirectoryCandidate) for c in candidates)

    def test_empty_inputs(self, config):
        """Should return an empty list for empty snapshots."""
        assert reconcile([], [], config) == []

    def test_tie_broken_by_path(self):
        """Should resolve equal scores in path order."""
        candidates = reconcile([entry("/b/app", 1), entry("/a/app", 1)], [], Config())
        assert names(candidates) == ["app", "b.app"]
        assert candidates[0].source_path == "/a/app"

    def test_display_names_unique(self):
        """Should never produce two candidates with the same display name."""
        directories = [entry(f"/{a}/{b}/app", i) for i, (a, b) in enumerate(
            [("x", "y"), ("z", "y"), ("x", "w"), ("y", "y"), ("q", "x.y")]
        )]
        sessions = [SessionRecord(name="app"), SessionRecord(name="y.app")]
        candidates = reconcile(directories, sessions, Config())
        display = names(candidates)
        assert len(display) == len(set(display))

    def test_unnameable_directory_is_skipped(self):
        """Should drop only the directory whose name search is exhausted."""
        directories = [entry("/a/app", 3), entry("/app", 2), entry("/lib", 1)]
        with patch("sessionizer.naming.MAX_SUFFIX_ATTEMPTS", 0):
            candidates = reconcile(directories, [], Config())
        assert [c.source_path for c in candidates] == ["/a/app", "/lib"]
        assert names(candidates) == ["app", "lib"]

    def test_unnameable_session_is_skipped(self):
        """Should drop only the session whose display name is exhausted."""
        sessions = [
            SessionRecord(name="work", working_dir="/a/app"),
            SessionRecord(name="app", working_dir="/x"),
            SessionRecord(name="notes"),
        ]
        with patch("sessionizer.naming.MAX_SUFFIX_ATTEMPTS", 0):
            candidates = reconcile([entry("/a/app", 1)], sessions, Config())
        assert names(candidates) == ["app", "notes"]
        assert candidates[0].session_link.name == "work"

    def test_deterministic(self, config):
        """Should yield the same ordered list across repeated runs."""
        directories = [entry("/home/user/a/app", 3), entry("/srv/app", 3), entry("/tmp/x", 9)]
        sessions = [SessionRecord(name="zeta"), SessionRecord(name="alpha")]
        first = search(reconcile(directories, sessions, config), "")
        second = search(reconcile(directories, sessions, config), "")
        assert first == second


class TestSessionLinking:
    """Tests for attaching sessions to directories."""

    def test_link_by_working_dir(self, config):
        """Should attach a session whose working dir equals the path."""
        sessions = [SessionRecord(name="work", working_dir="/home/user/projects/foo")]
        candidates = reconcile([entry("/home/user/projects/foo", 1)], sessions, config)
        assert len(candidates) == 1
        assert isinstance(candidates[0], LinkedCandidate)
        assert candidates[0].session_link.name == "work"
        assert candidates[0].display_name == "projects.foo"

    def test_link_by_name(self):
        """Should attach a session named like the resolved display name."""
        sessions = [SessionRecord(name="app")]
        candidates = reconcile([entry("/a/app", 1)], sessions, Config())
        assert len(candidates) == 1
        assert candidates[0].session_link.name == "app"

    def test_link_by_incremented_name(self):
        """Should attach "app.2" to the directory named "app"."""
        sessions = [SessionRecord(name="app.2", working_dir="/elsewhere")]
        candidates = reconcile([entry("/a/app", 1)], sessions, Config())
        assert len(candidates) == 1
        assert candidates[0].session_link.name == "app.2"

    def test_path_beats_name(self):
        """Should not let a name match steal a session bound to another path."""
        sessions = [SessionRecord(name="app", working_dir="/b/other")]
        directories = [entry("/a/app", 10), entry("/b/other", 1)]
        candidates = reconcile(directories, sessions, Config())
        by_path = {c.source_path: c for c in candidates}
        assert isinstance(by_path["/a/app"], DirectoryCandidate)
        assert by_path["/b/other"].session_link.name == "app"

    def test_richer_status_wins(self):
        """Should prefer the current session among equal-priority matches."""
        sessions = [
            SessionRecord(name="one", working_dir="/a/app"),
            SessionRecord(name="two", status=SessionStatus.CURRENT, working_dir="/a/app"),
        ]
        candidates = reconcile([entry("/a/app", 1)], sessions, Config())
        assert candidates[0].session_link.name == "two"
        assert candidates[1].key == "one"

    def test_live_session_is_switchable(self):
        """Should mark live-linked candidates as switch targets."""
        sessions = [SessionRecord(name="app")]
        candidates = reconcile([entry("/a/app", 1)], sessions, Config())
        assert candidates[0].switches


class TestSessionOnlyCandidates:
    """Tests for sessions without a tracked directory."""

    def test_appended_after_directories_by_name(self):
        """Should list unlinked sessions after directories in name order."""
        sessions = [SessionRecord(name="zeta"), SessionRecord(name="alpha")]
        candidates = reconcile([entry("/a/app", 1)], sessions, Config())
        assert names(candidates) == ["app", "alpha", "zeta"]
        assert isinstance(candidates[1], SessionCandidate)
        assert candidates[1].key == "alpha"
        assert candidates[1].source_path is None

    def test_colliding_session_name_is_disambiguated(self):
        """Should keep display names unique when a session reuses a name."""
        sessions = [
            SessionRecord(name="work", working_dir="/a/app"),
            SessionRecord(name="app", working_dir="/not/ranked"),
        ]
        candidates = reconcile([entry("/a/app", 1)], sessions, Config())
        assert names(candidates) == ["app", "app.2"]
        assert candidates[0].session_link.name == "work"
        assert candidates[1].key == "app"

    def test_suffix_never_shows_another_sessions_name(self):
        """Should not display a session under another session's real name."""
        sessions = [
            SessionRecord(name="work", working_dir="/a/app"),
            SessionRecord(name="app", working_dir="/x"),
            SessionRecord(name="app.2", working_dir="/y"),
        ]
        candidates = reconcile([entry("/a/app", 1)], sessions, Config())
        assert [(c.display_name, c.key) for c in candidates] == [
            ("app", "/a/app"),
            ("app.3", "app"),
            ("app.2", "app.2"),
        ]

    def test_resurrectable_hidden_by_default(self):
        """Should drop resurrectable sessions unless configured."""
        sessions = [SessionRecord(name="old", status=SessionStatus.RESURRECTABLE)]
        assert reconcile([], sessions, Config()) == []

    def test_resurrectable_shown_when_configured(self):
        """Should include resurrectable sessions when enabled."""
        sessions = [SessionRecord(name="old", status=SessionStatus.RESURRECTABLE)]
        candidates = reconcile([], sessions, Config(show_resurrectable=True))
        assert names(candidates) == ["old"]
        assert not candidates[0].switches

    def test_stale_resurrectable_yields_to_active(self):
        """Should show the active record when a resurrectable one shares its name."""
        sessions = [
            SessionRecord(name="app", status=SessionStatus.RESURRECTABLE),
            SessionRecord(name="app", status=SessionStatus.ACTIVE),
        ]
        candidates = reconcile([], sessions, Config(show_resurrectable=True))
        assert len(candidates) == 1
        assert candidates[0].session_link.status == SessionStatus.ACTIVE


class TestIncrementedName:
    """Tests for incremented-name detection."""

    def test_matches_numeric_suffix(self):
        assert is_incremented_name("app.3", "app", ".")

    def test_rejects_non_numeric(self):
        assert not is_incremented_name("app.x", "app", ".")
        assert not is_incremented_name("app.", "app", ".")
        assert not is_incremented_name("app", "app", ".")
