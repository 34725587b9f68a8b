"""Data models for proctab."""

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class ProcessRecord:
    """Immutable record of a process at snapshot time."""

    pid: int
    name: str
    cpu_percent: float  # 0.0 - 100.0 * core_count
    memory_rss: int  # Bytes


@dataclass(slots=True, frozen=True)
class View:
    """What the terminal draws: ordered rows, highlighted row and status line."""

    rows: tuple[ProcessRecord, ...]
    selected: int | None
    status: str
