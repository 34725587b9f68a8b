"""Process information source for proctab."""

import logging
import os
from typing import Protocol

import psutil

from proctab.models import ProcessRecord

logger = logging.getLogger(__name__)


class ProcessSourceError(Exception):
    """The process source could not complete a request."""


class TerminateError(ProcessSourceError):
    """A terminate request for a single pid failed."""

    def __init__(self, pid: int, reason: str) -> None:
        super().__init__(reason)
        self.pid = pid
        self.reason = reason


class ProcessNotFoundError(TerminateError):
    """The target process no longer exists."""

    def __init__(self, pid: int) -> None:
        super().__init__(pid, "no such process")


class PermissionDeniedError(TerminateError):
    """The caller may not signal the target process."""

    def __init__(self, pid: int) -> None:
        super().__init__(pid, "permission denied")


class ProcessSource(Protocol):
    """Anything that can enumerate processes and terminate one by pid."""

    def list_processes(self) -> list[ProcessRecord]: ...

    def terminate(self, pid: int) -> None: ...


class PsutilProcessSource:
    """
    Process source backed by psutil.

    Calls are synchronous: nothing is cached between listings apart from the
    per-process CPU counters psutil keeps itself.
    """

    ATTRS = ["pid", "name", "cpu_percent", "memory_info"]

    def __init__(self) -> None:
        """Initialize the source and remember our own pid."""
        self._own_pid = os.getpid()

    def list_processes(self) -> list[ProcessRecord]:
        """
        Collect a record for every visible process.

        Processes that die mid-iteration are skipped; unreadable fields default to empty.

        Raises:
            ProcessSourceError: If the process table itself cannot be read.
        """
        records: list[ProcessRecord] = []
        try:
            # process_iter skips vanished processes and fills denied attrs with None
            for proc in psutil.process_iter(attrs=self.ATTRS):
                info = proc.info
                mem_info = info.get("memory_info")
                records.append(
                    ProcessRecord(
                        pid=info["pid"],
                        name=info.get("name") or "",
                        cpu_percent=info.get("cpu_percent") or 0.0,
                        memory_rss=mem_info.rss if mem_info else 0,
                    )
                )
        except (psutil.Error, OSError) as exc:
            raise ProcessSourceError(f"cannot list processes: {exc}") from exc

        logger.debug("Listed %d processes", len(records))
        return records

    def terminate(self, pid: int) -> None:
        """
        Send SIGTERM to ``pid``.

        Raises:
            ProcessNotFoundError: The process is gone or is a zombie.
            PermissionDeniedError: We are not allowed to signal it.
            TerminateError: Any other failure, including targeting ourselves.
        """
        if pid == self._own_pid:
            raise TerminateError(pid, "refusing to terminate own process")

        try:
            psutil.Process(pid).terminate()
        except psutil.NoSuchProcess as exc:
            # ZombieProcess is a NoSuchProcess too
            raise ProcessNotFoundError(pid) from exc
        except psutil.AccessDenied as exc:
            raise PermissionDeniedError(pid) from exc
        except (psutil.Error, OSError, ValueError) as exc:
            raise TerminateError(pid, f"terminate failed: {exc}") from exc

        logger.info("Sent SIGTERM to pid %d", pid)
