"""Command-line entry point for sessionizer."""

import argparse
import sys

from .config import Config
from .frecency.feed import ZoxideFeed
from .logging_config import TmuxError, get_logger
from .models import Candidate, SessionStatus
from .picker import Picker
from .selection import Confirm, LayoutChosen, QuickCreate, TextInput
from .tmux.controller import TmuxController

logger = get_logger(__name__)

STATUS_MARKERS = {
    SessionStatus.CURRENT: "●",
    SessionStatus.ACTIVE: "○",
    SessionStatus.RESURRECTABLE: "↺",
}


def parse_options(pairs: list[str]) -> dict[str, str]:
    """Turn ["key=value", ...] into a dict, ignoring entries without '='."""
    options = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep:
            logger.warning(f"Ignoring option without '=': {pair!r}")
            continue
        options[key.strip()] = value.strip()
    return options


def format_candidate(candidate: Candidate) -> str:
    link = candidate.session_link
    marker = STATUS_MARKERS[link.status] if link is not None else " "
    line = f"{marker} {candidate.display_name}"
    if candidate.source_path is not None:
        line += f"  ({candidate.source_path})"
    return line


def run(
    query: str,
    options: dict[str, str],
    switch: bool = False,
    quick: bool = False,
    layout: str | None = None,
    feed: ZoxideFeed | None = None,
    tmux: TmuxController | None = None,
) -> int:
    """List candidates for a query, or act on the best one."""
    config = Config.from_options(options)
    feed = feed or ZoxideFeed()
    tmux = tmux or TmuxController()

    picker = Picker(config)
    picker.load_directories(feed.fetch)
    picker.load_sessions(lambda: tmux.list_all_records(config.show_resurrectable))
    if query:
        picker.handle(TextInput(text=query))

    if not switch:
        for candidate, _ in picker.results():
            print(format_candidate(candidate))
        return 0

    action = picker.handle(QuickCreate() if quick else Confirm())
    if action is None and picker.error is None:
        # The candidate needs a new session; pick its layout
        action = picker.handle(LayoutChosen(layout=layout))
    if picker.error is not None:
        print(f"error: {picker.error}", file=sys.stderr)
        return 1
    if action is None:
        print("No matching directory or session", file=sys.stderr)
        return 1

    try:
        tmux.apply(action)
    except TmuxError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


def main() -> None:
    """Entry point for the sessionizer command."""
    parser = argparse.ArgumentParser(
        description="Jump to or create tmux sessions from zoxide directories"
    )
    parser.add_argument("query", nargs="?", default="", help="Fuzzy filter")
    parser.add_argument(
        "-o",
        "--option",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Configuration option (session_separator, base_paths, "
        "show_resurrectable_sessions, default_layout)",
    )
    parser.add_argument(
        "--switch",
        action="store_true",
        help="Switch to (or create) the best match instead of listing",
    )
    parser.add_argument(
        "--quick",
        action="store_true",
        help="With --switch, create new sessions using the default layout",
    )
    parser.add_argument("--layout", help="With --switch, layout for a new session")

    args = parser.parse_args()
    sys.exit(
        run(
            args.query,
            parse_options(args.option),
            switch=args.switch,
            quick=args.quick,
            layout=args.layout,
        )
    )


if __name__ == "__main__":
    main()
