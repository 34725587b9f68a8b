"""Shared fakes for proctab tests."""

from collections import deque

import pytest

from proctab.models import ProcessRecord, View
from proctab.source import ProcessSourceError


def make_record(pid: int, name: str = "", cpu: float = 0.0, rss: int = 0) -> ProcessRecord:
    """Build a ProcessRecord with defaults for the fields a test does not care about."""
    return ProcessRecord(pid=pid, name=name or f"proc{pid}", cpu_percent=cpu, memory_rss=rss)


class FakeSource:
    """
    In-memory process source.

    ``listings`` is consumed one entry per ``list_processes`` call; the last
    entry repeats. An entry that is an exception instance is raised instead.
    ``terminate_errors`` maps a pid to the exception its terminate raises.
    """

    def __init__(self, *listings, terminate_errors=None):
        self.listings = deque(listings)
        self.terminate_errors = dict(terminate_errors or {})
        self.list_calls = 0
        self.terminated: list[int] = []

    def list_processes(self) -> list[ProcessRecord]:
        self.list_calls += 1
        entry = self.listings.popleft() if len(self.listings) > 1 else self.listings[0]
        if isinstance(entry, ProcessSourceError):
            raise entry
        return list(entry)

    def terminate(self, pid: int) -> None:
        self.terminated.append(pid)
        if pid in self.terminate_errors:
            raise self.terminate_errors[pid]


class ScriptedTerminal:
    """Terminal that replays a fixed key sequence and records every render."""

    def __init__(self, keys):
        self.keys = deque(keys)
        self.views: list[View] = []
        self.reads = 0

    def render(self, view: View) -> None:
        self.views.append(view)

    def next_key(self) -> str:
        self.reads += 1
        return self.keys.popleft()


@pytest.fixture
def three_processes() -> list[ProcessRecord]:
    """Pids 1/2/3 with CPU usage 30/20/10."""
    return [
        make_record(1, "a", cpu=30.0),
        make_record(2, "b", cpu=20.0),
        make_record(3, "c", cpu=10.0),
    ]
