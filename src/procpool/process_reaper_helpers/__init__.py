"""Helper modules for ProcessReaper."""

from .process_terminator import KILL_UTILITY, terminate_pid

__all__ = ["KILL_UTILITY", "terminate_pid"]
