"""Value types shared by the census, reaper, launcher and dispatcher."""

from __future__ import annotations

import shlex
from dataclasses import dataclass
from enum import Enum
from typing import Tuple


@dataclass(frozen=True)
class ProcessRecord:
    """Point-in-time snapshot of one running process matching the base command."""

    pid: int
    start_time: float
    command_line: str

    def age_seconds(self, now: float) -> float:
        return now - self.start_time


@dataclass(frozen=True)
class CommandInvocation:
    """One queued invocation of the base command."""

    base_command: str
    args: Tuple[str, ...]

    @property
    def text(self) -> str:
        return " ".join((self.base_command, *self.args))

    @property
    def argv(self) -> list[str]:
        return shlex.split(self.base_command) + list(self.args)


class ReapOutcome(Enum):
    """Result of evaluating a process against its time budget."""

    KILLED = "killed"
    KILL_FAILED = "kill_failed"
    NOT_EXPIRED = "not_expired"


__all__ = ["CommandInvocation", "ProcessRecord", "ReapOutcome"]
