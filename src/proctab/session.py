"""Interactive session: the key-driven state machine over the snapshot store."""

import logging
from enum import Enum
from typing import Protocol

from proctab.models import View
from proctab.source import ProcessSource, ProcessSourceError, TerminateError
from proctab.store import Direction, SnapshotStore

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """Lifecycle state of a session."""

    RUNNING = "running"
    TERMINATED = "terminated"


class SessionEvent(Enum):
    """Input events understood by the session."""

    NAVIGATE_UP = "navigate-up"
    NAVIGATE_DOWN = "navigate-down"
    REFRESH = "refresh"
    TERMINATE = "terminate"
    QUIT = "quit"
    IGNORED = "ignored"


KEYMAP: dict[str, SessionEvent] = {
    "j": SessionEvent.NAVIGATE_DOWN,
    "k": SessionEvent.NAVIGATE_UP,
    "d": SessionEvent.TERMINATE,
    "r": SessionEvent.REFRESH,
    "q": SessionEvent.QUIT,
}


def event_for_key(key: str) -> SessionEvent:
    """Map a key name to its session event; unknown keys are ignored."""
    return KEYMAP.get(key, SessionEvent.IGNORED)


class Terminal(Protocol):
    """Anything that can draw a view and hand back the next key press."""

    def render(self, view: View) -> None: ...

    def next_key(self) -> str: ...


class Session:
    """
    Owns the snapshot store and the status line, and applies input events.

    Collaborator failures after startup never escape ``handle``: they become
    the status message and leave the snapshot as it was.
    """

    def __init__(self, source: ProcessSource) -> None:
        """
        Initialize the Session.

        Args:
            source: Where process listings come from and terminations go to.
        """
        self._source = source
        self._store = SnapshotStore()
        self._status = ""
        self._state = SessionState.RUNNING

    @property
    def state(self) -> SessionState:
        """Get the lifecycle state."""
        return self._state

    @property
    def status(self) -> str:
        """Get the last action's status message."""
        return self._status

    def start(self) -> None:
        """
        Load the first snapshot.

        Raises:
            ProcessSourceError: If the source cannot list processes. This is
                fatal at startup, unlike later refresh failures.
        """
        self._store.replace(self._source.list_processes())
        logger.info("Loaded %d processes", len(self._store))

    def view(self) -> View:
        """Return the current rows, highlighted row and status text."""
        return View(
            rows=self._store.records,
            selected=self._store.cursor,
            status=self._status,
        )

    def handle(self, event: SessionEvent) -> bool:
        """
        Apply one input event.

        Returns:
            True if the view should be redrawn.
        """
        if self._state is SessionState.TERMINATED:
            return False

        logger.debug("Handling %s", event.value)
        match event:
            case SessionEvent.NAVIGATE_UP:
                self._store.move_selection(Direction.UP)
            case SessionEvent.NAVIGATE_DOWN:
                self._store.move_selection(Direction.DOWN)
            case SessionEvent.REFRESH:
                self._refresh()
            case SessionEvent.TERMINATE:
                self._terminate_selected()
            case SessionEvent.QUIT:
                self._state = SessionState.TERMINATED
                return False
            case _:
                return False
        return True

    def _refresh(self) -> None:
        try:
            self._store.replace(self._source.list_processes())
        except ProcessSourceError as exc:
            logger.warning("Refresh failed: %s", exc)
            self._status = f"refresh failed: {exc}"
            return
        logger.info("Refreshed, %d processes", len(self._store))
        self._status = "refreshed"

    def _terminate_selected(self) -> None:
        pid = self._store.current_pid()
        if pid is None:
            self._status = "nothing selected"
            return

        try:
            self._source.terminate(pid)
        except TerminateError as exc:
            logger.warning("Terminate of pid %d failed: %s", pid, exc.reason)
            self._status = exc.reason
            return
        except ProcessSourceError as exc:
            logger.warning("Terminate of pid %d failed: %s", pid, exc)
            self._status = f"terminate failed: {exc}"
            return

        logger.info("Terminated pid %d", pid)
        self._status = f"terminated pid {pid}"
        try:
            self._store.replace(self._source.list_processes())
        except ProcessSourceError as exc:
            logger.warning("Refresh after terminate failed: %s", exc)
            self._status = f"terminated pid {pid}; refresh failed: {exc}"


def run_session(source: ProcessSource, terminal: Terminal) -> int:
    """
    Run a blocking session against ``terminal`` until the user quits.

    Raises:
        ProcessSourceError: If the first listing fails.

    Returns:
        The exit code, 0 on a normal quit.
    """
    session = Session(source)
    session.start()
    terminal.render(session.view())

    while session.state is SessionState.RUNNING:
        if session.handle(event_for_key(terminal.next_key())):
            terminal.render(session.view())

    return 0
