"""Deliver a termination signal to a pid with a command-line fallback."""

from __future__ import annotations

import logging
import subprocess
from typing import Sequence

import psutil

logger = logging.getLogger(__name__)

KILL_UTILITY = ("kill", "-s", "TERM")


def terminate_pid(pid: int, *, kill_utility: Sequence[str] = KILL_UTILITY) -> bool:
    """
    Ask *pid* to terminate with SIGTERM.

    The psutil signal is tried first. When it is refused, the platform ``kill``
    utility is tried with the same signal. A ``True`` result only means the
    signal was delivered, not that the process has exited.

    Args:
        pid: Target process id
        kill_utility: Command prefix for the fallback path; the pid is appended

    Returns:
        True when either path delivered the signal, False otherwise
    """
    try:
        psutil.Process(pid).terminate()
    except psutil.NoSuchProcess:
        logger.debug("Process %s exited before it could be signalled", pid)
        return False
    except (psutil.AccessDenied, psutil.Error, OSError) as exc:
        logger.debug("psutil could not signal %s (%s); trying %s", pid, exc, kill_utility[0])
        return _terminate_with_utility(pid, kill_utility)
    return True


def _terminate_with_utility(pid: int, kill_utility: Sequence[str]) -> bool:
    try:
        result = subprocess.run(
            [*kill_utility, str(pid)],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=False,
        )
    except (OSError, subprocess.SubprocessError) as exc:
        logger.debug("Fallback %s failed for %s: %s", kill_utility[0], pid, exc)
        return False
    return result.returncode == 0
