"""Tests for process terminator module."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import psutil

from procpool.process_reaper_helpers.process_terminator import terminate_pid

RUN_PATH = "procpool.process_reaper_helpers.process_terminator.subprocess.run"


class TestTerminatePid:
    """Tests for terminate_pid function."""

    def test_signals_through_psutil(self) -> None:
        mock_process = MagicMock()

        with patch("psutil.Process", return_value=mock_process) as process_cls, patch(RUN_PATH) as run:
            assert terminate_pid(123) is True

        process_cls.assert_called_once_with(123)
        mock_process.terminate.assert_called_once()
        run.assert_not_called()

    def test_already_exited_process_reports_failure(self) -> None:
        with patch("psutil.Process", side_effect=psutil.NoSuchProcess(123)), patch(RUN_PATH) as run:
            assert terminate_pid(123) is False

        run.assert_not_called()

    def test_access_denied_falls_back_to_kill_utility(self) -> None:
        mock_process = MagicMock()
        mock_process.terminate.side_effect = psutil.AccessDenied(123)

        with patch("psutil.Process", return_value=mock_process), patch(RUN_PATH, return_value=MagicMock(returncode=0)) as run:
            assert terminate_pid(123) is True

        assert run.call_args.args[0] == ["kill", "-s", "TERM", "123"]

    def test_fallback_failure_reports_false(self) -> None:
        with patch("psutil.Process", side_effect=psutil.AccessDenied(123)), patch(RUN_PATH, return_value=MagicMock(returncode=1)):
            assert terminate_pid(123) is False

    def test_missing_kill_utility_reports_false(self) -> None:
        with patch("psutil.Process", side_effect=OSError("denied")), patch(RUN_PATH, side_effect=FileNotFoundError("kill")):
            assert terminate_pid(123) is False

    def test_custom_kill_utility(self) -> None:
        with patch("psutil.Process", side_effect=psutil.AccessDenied(5)), patch(RUN_PATH, return_value=MagicMock(returncode=0)) as run:
            assert terminate_pid(5, kill_utility=("/usr/bin/kill", "-TERM")) is True

        assert run.call_args.args[0] == ["/usr/bin/kill", "-TERM", "5"]
