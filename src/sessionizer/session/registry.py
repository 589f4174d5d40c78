"""Snapshot of live and resurrectable sessions."""

from collections.abc import Iterable

from ..config import normalize_path
from ..logging_config import get_logger
from ..models import SessionRecord, SessionStatus

logger = get_logger(__name__)


class SessionRegistry:
    """Sessions known at one point in time, unique by name.

    A resurrectable record whose name is also live is stale and dropped;
    in general the record with the richer status wins.
    """

    def __init__(self, records: Iterable[SessionRecord] = ()):
        by_name: dict[str, SessionRecord] = {}
        for record in records:
            if record.working_dir:
                record = record.model_copy(
                    update={"working_dir": normalize_path(record.working_dir)}
                )
            existing = by_name.get(record.name)
            if existing is None or record.status.rank > existing.status.rank:
                by_name[record.name] = record
            elif existing.status.is_live and record.status.is_live:
                logger.warning(f"Duplicate live session name {record.name!r}")
        self._records = tuple(sorted(by_name.values(), key=lambda r: r.name))

    def __len__(self) -> int:
        return len(self._records)

    def records(self, include_resurrectable: bool = True) -> list[SessionRecord]:
        """Sessions in name order."""
        if include_resurrectable:
            return list(self._records)
        return [r for r in self._records if r.status.is_live]

    def live_names(self) -> set[str]:
        return {r.name for r in self._records if r.status.is_live}


def parse_resurrect_file(content: str) -> list[SessionRecord]:
    """Read resurrectable sessions from a tmux-resurrect save file.

    Pane lines look like "pane<TAB>session<TAB>...<TAB>:path<TAB>...";
    the first pane seen for a session supplies its working directory.
    """
    records: dict[str, SessionRecord] = {}
    for line in content.splitlines():
        fields = line.split("\t")
        if len(fields) < 2 or fields[0] != "pane":
            continue
        name = fields[1]
        if not name or name in records:
            continue
        working_dir = None
        if len(fields) > 7 and fields[7].startswith(":"):
            working_dir = fields[7][1:] or None
        records[name] = SessionRecord(
            name=name,
            status=SessionStatus.RESURRECTABLE,
            working_dir=working_dir,
        )
    return list(records.values())
