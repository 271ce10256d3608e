"""Tests for the process census backends."""

from __future__ import annotations

import logging
import subprocess
from types import SimpleNamespace
from unittest.mock import MagicMock, PropertyMock, patch

import psutil
import pytest

from procpool.config import ConfigurationError
from procpool.process_census import PsTableCensus, PsutilCensus, create_census


def _proc(pid, cmdline, create_time=1000.0, status=psutil.STATUS_RUNNING):
    return SimpleNamespace(info={"pid": pid, "cmdline": cmdline, "create_time": create_time, "status": status})


class TestPsutilCensus:
    """Tests for PsutilCensus.census."""

    def test_returns_matching_processes(self) -> None:
        processes = [
            _proc(10, ["php", "worker.php", "--job", "1"], 900.0),
            _proc(11, ["bash"]),
            _proc(12, ["php", "worker.php", "--job", "2"], 950.0),
        ]
        census = PsutilCensus(exclude_pid=1)

        with patch("procpool.process_census.psutil.process_iter", return_value=processes):
            records = census.census("worker.php")

        assert [(r.pid, r.start_time, r.command_line) for r in records] == [
            (10, 900.0, "php worker.php --job 1"),
            (12, 950.0, "php worker.php --job 2"),
        ]

    def test_returns_empty_when_nothing_matches(self) -> None:
        census = PsutilCensus(exclude_pid=1)

        with patch("procpool.process_census.psutil.process_iter", return_value=[_proc(11, ["bash"])]):
            assert census.census("worker.php") == []

    def test_excludes_own_pid_and_zombies(self) -> None:
        processes = [
            _proc(1, ["python", "worker.php"]),
            _proc(2, ["worker.php"], status=psutil.STATUS_ZOMBIE),
            _proc(3, ["worker.php"]),
        ]
        census = PsutilCensus(exclude_pid=1)

        with patch("procpool.process_census.psutil.process_iter", return_value=processes):
            records = census.census("worker.php")

        assert [r.pid for r in records] == [3]

    def test_never_double_counts_a_pid(self) -> None:
        processes = [_proc(5, ["worker"], 1.0), _proc(5, ["worker"], 2.0)]
        census = PsutilCensus(exclude_pid=1)

        with patch("procpool.process_census.psutil.process_iter", return_value=processes):
            records = census.census("worker")

        assert len(records) == 1
        assert records[0].start_time == 1.0

    def test_skips_and_logs_entries_without_start_time(self, caplog) -> None:
        processes = [_proc(7, ["worker"], create_time=None), _proc(8, ["worker"])]
        census = PsutilCensus(exclude_pid=1)

        with caplog.at_level(logging.WARNING, logger="procpool.process_census"):
            with patch("procpool.process_census.psutil.process_iter", return_value=processes):
                records = census.census("worker")

        assert [r.pid for r in records] == [8]
        assert "unmatchable process" in caplog.text
        assert "search term was worker" in caplog.text

    def test_skips_processes_that_vanish(self) -> None:
        vanished = MagicMock()
        type(vanished).info = PropertyMock(side_effect=psutil.NoSuchProcess(9))
        census = PsutilCensus(exclude_pid=1)

        with patch("procpool.process_census.psutil.process_iter", return_value=[vanished, _proc(4, ["worker"])]):
            records = census.census("worker")

        assert [r.pid for r in records] == [4]

    def test_listing_failure_returns_empty(self, caplog) -> None:
        census = PsutilCensus(exclude_pid=1)

        with patch("procpool.process_census.psutil.process_iter", side_effect=psutil.Error()):
            assert census.census("worker") == []

        assert "Error during process census" in caplog.text


def _ps_result(stdout: str, *, returncode: int = 0, pid: int = 999) -> MagicMock:
    proc = MagicMock()
    proc.communicate.return_value = (stdout, None)
    proc.returncode = returncode
    proc.pid = pid
    return proc


PS_OUTPUT = """\
    1 Sun Oct 18 08:00:00 2026 /sbin/init
  200 Sun Oct 18 12:00:00 2026 php worker.php --job 1
  201 Sun Oct 18 12:00:05 2026 php worker.php --job 2
  999 Sun Oct 18 12:00:09 2026 ps -eo pid=,lstart=,command= worker.php
  300 garbage php worker.php
  400 Sun Oct 18 12:00:07 2026 php myworker.php
"""


class TestPsTableCensus:
    """Tests for PsTableCensus.census."""

    def test_parses_matching_lines_and_skips_helper(self) -> None:
        census = PsTableCensus(exclude_pid=1)

        with patch("procpool.process_census.subprocess.Popen", return_value=_ps_result(PS_OUTPUT)) as popen:
            records = census.census("worker.php")

        assert [r.pid for r in records] == [200, 201]
        assert records[0].command_line == "php worker.php --job 1"
        assert popen.call_args.args[0] == ("ps", "-eo", "pid=,lstart=,command=")
        assert popen.call_args.kwargs["env"]["LC_ALL"] == "C"

    def test_unparsable_line_is_logged_and_not_counted(self, caplog) -> None:
        census = PsTableCensus(exclude_pid=1)

        with caplog.at_level(logging.WARNING, logger="procpool.process_census"):
            with patch("procpool.process_census.subprocess.Popen", return_value=_ps_result(PS_OUTPUT)):
                records = census.census("worker.php")

        assert 300 not in [r.pid for r in records]
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert "300 garbage php worker.php" in warnings[0].getMessage()

    def test_excludes_own_pid(self) -> None:
        census = PsTableCensus(exclude_pid=200)

        with patch("procpool.process_census.subprocess.Popen", return_value=_ps_result(PS_OUTPUT)):
            records = census.census("worker.php")

        assert [r.pid for r in records] == [201]

    def test_missing_ps_returns_empty(self, caplog) -> None:
        census = PsTableCensus(exclude_pid=1)

        with patch("procpool.process_census.subprocess.Popen", side_effect=FileNotFoundError("ps")):
            assert census.census("worker.php") == []

        assert "Unable to list processes" in caplog.text

    def test_failed_ps_returns_empty(self) -> None:
        census = PsTableCensus(exclude_pid=1)

        with patch("procpool.process_census.subprocess.Popen", return_value=_ps_result(PS_OUTPUT, returncode=1)):
            assert census.census("worker.php") == []

    def test_timeout_is_absorbed(self) -> None:
        census = PsTableCensus(exclude_pid=1)
        proc = _ps_result("")
        proc.communicate.side_effect = subprocess.SubprocessError("boom")

        with patch("procpool.process_census.subprocess.Popen", return_value=proc):
            assert census.census("worker.php") == []


class TestCreateCensus:
    """Tests for create_census."""

    def test_known_backends(self) -> None:
        assert isinstance(create_census("psutil"), PsutilCensus)
        assert isinstance(create_census("ps"), PsTableCensus)

    def test_unknown_backend_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="census_backend"):
            create_census("wmic")
