"""proctab - Main Textual application."""

import argparse
import logging
import sys

from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.containers import Container
from textual.logging import TextualHandler
from textual.widgets import DataTable, Static

from proctab.models import ProcessRecord, View
from proctab.session import Session, SessionState, event_for_key
from proctab.source import ProcessSourceError, PsutilProcessSource

logger = logging.getLogger(__name__)

KEY_HINTS = "j/k move  d terminate  r refresh  q quit"


def format_bytes(size: int) -> str:
    """Format bytes as human-readable string."""
    if size < 1024:
        return f"{size}B"
    value = float(size)
    for unit in ["K", "M", "G", "T"]:
        value /= 1024
        if value < 1024:
            return f"{value:.1f}{unit}"
    return f"{value / 1024:.1f}P"


class ProcessRows(DataTable, can_focus=False):
    """Data table that never takes focus; keys belong to the session."""


class ProcessTable(Container):
    """Container for the process data table."""

    DEFAULT_CSS = """
    ProcessTable {
        height: 1fr;
        border: double $primary;
    }
    """

    def compose(self) -> ComposeResult:
        """Compose the process table."""
        yield ProcessRows(id="process-table", cursor_type="row", zebra_stripes=True)

    def on_mount(self) -> None:
        """Initialize the data table when mounted."""
        self.border_title = "Processes"
        table = self.query_one("#process-table", DataTable)

        table.add_column("NAME", key="name", width=32)
        table.add_column("PID", key="pid", width=8)
        table.add_column("CPU USAGE", key="cpu", width=10)
        table.add_column("MEMORY", key="mem", width=10)

    def show(self, rows: tuple[ProcessRecord, ...], selected: int | None) -> None:
        """Redraw all rows and put the highlight on ``selected``."""
        table = self.query_one("#process-table", DataTable)
        table.clear()
        for proc in rows:
            table.add_row(
                proc.name,
                str(proc.pid),
                f"{proc.cpu_percent:5.1f}",
                format_bytes(proc.memory_rss),
                key=str(proc.pid),
            )

        table.show_cursor = selected is not None
        if selected is not None:
            table.move_cursor(row=selected)


class StatusBar(Static):
    """One-line status message and key hints."""

    DEFAULT_CSS = """
    StatusBar {
        dock: bottom;
        height: 1;
        background: $surface;
    }
    """

    def show(self, status: str) -> None:
        """Display ``status`` next to the key hints."""
        text = Text(status, style="bold") if status else Text()
        if status:
            text.append("  |  ")
        text.append(KEY_HINTS, style="dim")
        self.update(text)


class ProctabApp(App):
    """Main proctab application."""

    TITLE = "proctab"
    SUB_TITLE = "Process table"

    def __init__(self, session: Session) -> None:
        """
        Initialize the ProctabApp.

        Args:
            session: A started session; the app only renders it and feeds it keys.
        """
        super().__init__()
        self._session = session

    def compose(self) -> ComposeResult:
        """Compose the application layout."""
        yield ProcessTable()
        yield StatusBar(id="status-bar")

    def on_mount(self) -> None:
        """Draw the initial snapshot."""
        self.show_view(self._session.view())

    def on_key(self, event: events.Key) -> None:
        """Feed a key press to the session and redraw or exit as needed."""
        if self._session.handle(event_for_key(event.key)):
            self.show_view(self._session.view())
        if self._session.state is SessionState.TERMINATED:
            self.exit()

    def show_view(self, view: View) -> None:
        """Push a session view to the widgets."""
        self.query_one(ProcessTable).show(view.rows, view.selected)
        self.query_one("#status-bar", StatusBar).show(view.status)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line options."""
    parser = argparse.ArgumentParser(
        prog="proctab",
        description="Browse running processes and terminate them from the keyboard.",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-file", metavar="PATH", help="Write log records to PATH")
    return parser.parse_args(argv)


def setup_logging(debug: bool = False, log_file: str | None = None) -> None:
    """Configure logging without writing over the screen."""
    level = logging.DEBUG if debug else logging.INFO
    fmt = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    if log_file:
        logging.basicConfig(level=level, format=fmt, filename=log_file)
    else:
        logging.basicConfig(level=level, format=fmt, handlers=[TextualHandler()])


def main(argv: list[str] | None = None) -> int:
    """Entry point for proctab application."""
    args = parse_args(argv)
    setup_logging(debug=args.debug, log_file=args.log_file)

    session = Session(PsutilProcessSource())
    try:
        session.start()
    except ProcessSourceError as exc:
        logger.error("Startup failed: %s", exc)
        print(f"proctab: {exc}", file=sys.stderr)
        return 1

    app = ProctabApp(session)
    # Clicks would move the highlight behind the session's back
    app.run(mouse=False)
    if app.return_code:
        logger.error("Terminal failed with return code %d", app.return_code)
        print("proctab: terminal failed", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
