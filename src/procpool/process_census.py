"""
Process census: enumerate running instances of the managed command.

Two backends implement the same contract:

1. ``PsutilCensus`` walks the process table through psutil (default)
2. ``PsTableCensus`` parses the text output of ``ps -eo pid,lstart,command``

Both return a fresh list of ProcessRecord snapshots on every call, never
raise for zero matches, and skip entries they cannot interpret after
logging them as anomalies.
"""

from __future__ import annotations

import logging
import os
import subprocess
from typing import Dict, Iterable, List, Optional, Protocol

import psutil

from .config import ConfigurationError
from .errors import CensusLineError
from .process_census_helpers import PS_COMMAND, matches_command, parse_ps_line
from .process_models import ProcessRecord

logger = logging.getLogger(__name__)

CENSUS_BACKENDS = ("psutil", "ps")

_PSUTIL_ATTRS = ["pid", "create_time", "cmdline", "status"]


class ProcessCensus(Protocol):
    """Read-only view of the OS process table."""

    def census(self, base_command: str) -> List[ProcessRecord]: ...


def _log_unmatchable(raw: object, base_command: str) -> None:
    logger.warning(
        "An unmatchable process was found in the process table. Investigate immediately. "
        "The entry found was: %s and the search term was %s",
        raw,
        base_command,
    )


def _as_text(cmdline: object) -> str:
    if isinstance(cmdline, str):
        return cmdline
    return " ".join(str(arg) for arg in cmdline)


def _dedupe_by_pid(records: Iterable[ProcessRecord]) -> List[ProcessRecord]:
    unique: Dict[int, ProcessRecord] = {}
    for record in records:
        unique.setdefault(record.pid, record)
    return list(unique.values())


class PsutilCensus:
    """Census backed by ``psutil.process_iter``."""

    def __init__(self, *, exclude_pid: Optional[int] = None):
        self.exclude_pid = os.getpid() if exclude_pid is None else exclude_pid

    def census(self, base_command: str) -> List[ProcessRecord]:
        records: List[ProcessRecord] = []
        try:
            processes = psutil.process_iter(_PSUTIL_ATTRS)
            for proc in processes:
                try:
                    info = proc.info
                except (psutil.NoSuchProcess, psutil.AccessDenied):
                    logger.debug("Process vanished or denied access during census")
                    continue
                if info.get("pid") == self.exclude_pid:
                    continue
                # Exited children awaiting collection are no longer running
                if info.get("status") == psutil.STATUS_ZOMBIE:
                    continue
                cmdline = info.get("cmdline")
                if not cmdline or not matches_command(_as_text(cmdline), base_command):
                    continue
                record = self._to_record(info)
                if record is None:
                    _log_unmatchable(info, base_command)
                    continue
                records.append(record)
        except (psutil.Error, OSError):
            logger.exception("Error during process census for %s", base_command)
        return _dedupe_by_pid(records)

    @staticmethod
    def _to_record(info: dict) -> Optional[ProcessRecord]:
        pid = info.get("pid")
        create_time = info.get("create_time")
        cmdline = info.get("cmdline")
        if not isinstance(pid, int) or pid <= 0:
            return None
        if not isinstance(create_time, (int, float)):
            return None
        if not isinstance(cmdline, list):
            return None
        return ProcessRecord(
            pid=pid,
            start_time=float(create_time),
            command_line=" ".join(str(arg) for arg in cmdline),
        )


class PsTableCensus:
    """Census backed by the text output of the ``ps`` utility."""

    def __init__(self, *, exclude_pid: Optional[int] = None, ps_command: Iterable[str] = PS_COMMAND):
        self.exclude_pid = os.getpid() if exclude_pid is None else exclude_pid
        self.ps_command = tuple(ps_command)

    def census(self, base_command: str) -> List[ProcessRecord]:
        listing = self._read_process_table()
        if listing is None:
            return []
        helper_pid, lines = listing

        records: List[ProcessRecord] = []
        for line in lines:
            if not line.strip() or not matches_command(line, base_command):
                continue
            try:
                record = parse_ps_line(line)
            except CensusLineError:
                _log_unmatchable(line, base_command)
                continue
            if record.pid in (self.exclude_pid, helper_pid):
                continue
            records.append(record)
        return _dedupe_by_pid(records)

    def _read_process_table(self) -> Optional[tuple[int, List[str]]]:
        env = dict(os.environ, LC_ALL="C")
        try:
            proc = subprocess.Popen(
                self.ps_command,
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
                text=True,
                env=env,
            )
            output, _ = proc.communicate()
        except (OSError, subprocess.SubprocessError):
            logger.exception("Unable to list processes with %s", " ".join(self.ps_command))
            return None

        if proc.returncode != 0:
            logger.warning("%s exited with status %s", " ".join(self.ps_command), proc.returncode)
            return None
        return proc.pid, output.splitlines()


def create_census(backend: str = "psutil") -> ProcessCensus:
    """Return the census implementation registered under *backend*."""
    if backend == "psutil":
        return PsutilCensus()
    if backend == "ps":
        return PsTableCensus()
    raise ConfigurationError.invalid_value("census_backend", backend, f"Expected one of {', '.join(CENSUS_BACKENDS)}")


__all__ = [
    "CENSUS_BACKENDS",
    "ProcessCensus",
    "PsTableCensus",
    "PsutilCensus",
    "create_census",
]
