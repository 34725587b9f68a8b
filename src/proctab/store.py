"""Snapshot store: the ordered process list and the selection cursor."""

from collections.abc import Iterable
from enum import Enum

from proctab.models import ProcessRecord


class Direction(Enum):
    """Direction of a single selection move."""

    UP = "up"
    DOWN = "down"


def sort_key(record: ProcessRecord) -> tuple[float, int, int]:
    """Fixed snapshot order: busiest first, then largest, then lowest pid."""
    return (-record.cpu_percent, -record.memory_rss, record.pid)


class SnapshotStore:
    """
    Holds the current snapshot and the selection cursor.

    The cursor is ``None`` exactly when the snapshot is empty; otherwise it is a
    valid index into the snapshot. Every mutating operation keeps that true.
    """

    def __init__(self) -> None:
        """Initialize an empty store with no selection."""
        self._records: tuple[ProcessRecord, ...] = ()
        self._cursor: int | None = None

    def __len__(self) -> int:
        return len(self._records)

    @property
    def records(self) -> tuple[ProcessRecord, ...]:
        """Get the current snapshot in display order."""
        return self._records

    @property
    def cursor(self) -> int | None:
        """Get the selection cursor, or None when nothing is selected."""
        return self._cursor

    def current_pid(self) -> int | None:
        """Return the pid under the cursor, or None when nothing is selected."""
        if self._cursor is None:
            return None
        return self._records[self._cursor].pid

    def replace(self, records: Iterable[ProcessRecord]) -> None:
        """
        Install a new snapshot and repair the cursor.

        Selection follows the previously selected pid when it survives. When it
        is gone, the cursor moves to its nearest surviving neighbour from the old
        order, preferring the row above on a tie.

        Raises:
            ValueError: If two records share a pid.
        """
        new_records = tuple(sorted(records, key=sort_key))
        index_by_pid = {record.pid: i for i, record in enumerate(new_records)}
        if len(index_by_pid) != len(new_records):
            raise ValueError("duplicate pid in snapshot")

        old_records = self._records
        old_cursor = self._cursor
        self._records = new_records

        if not new_records:
            self._cursor = None
        elif old_cursor is None:
            self._cursor = 0
        else:
            self._cursor = self._follow(old_records, old_cursor, index_by_pid)

    def _follow(
        self,
        old_records: tuple[ProcessRecord, ...],
        old_cursor: int,
        index_by_pid: dict[int, int],
    ) -> int:
        """Find the new index for the old selection or its nearest survivor."""
        selected_pid = old_records[old_cursor].pid
        if selected_pid in index_by_pid:
            return index_by_pid[selected_pid]

        for distance in range(1, len(old_records)):
            for old_index in (old_cursor - distance, old_cursor + distance):
                if 0 <= old_index < len(old_records):
                    pid = old_records[old_index].pid
                    if pid in index_by_pid:
                        return index_by_pid[pid]

        return min(old_cursor, len(self._records) - 1)

    def move_selection(self, direction: Direction) -> None:
        """Move the cursor one row, saturating at the first and last rows."""
        if self._cursor is None:
            return
        if direction is Direction.UP:
            self._cursor = max(0, self._cursor - 1)
        else:
            self._cursor = min(len(self._records) - 1, self._cursor + 1)
