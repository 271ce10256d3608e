"""Fire-and-forget launch of detached background processes."""

from __future__ import annotations

import logging
import os
import subprocess
from typing import List

from .process_models import CommandInvocation

logger = logging.getLogger(__name__)


class DetachedLauncher:
    """
    Starts commands in their own session with output appended to a sink.

    ``launch`` reports only whether the OS accepted the process. The exit
    status is never surfaced; ``collect_finished`` merely releases children
    that have exited so they do not linger in the process table.
    """

    def __init__(self, output_sink: str = os.devnull):
        self.output_sink = output_sink
        self._children: List[subprocess.Popen] = []

    def launch(self, invocation: CommandInvocation) -> bool:
        try:
            with open(self.output_sink, "ab") as sink:
                child = subprocess.Popen(
                    invocation.argv,
                    stdin=subprocess.DEVNULL,
                    stdout=sink,
                    stderr=subprocess.STDOUT,
                    start_new_session=True,
                )
        except (OSError, ValueError, subprocess.SubprocessError) as exc:
            logger.error("Failed to launch %s: %s", invocation.text, exc)
            return False

        self._children.append(child)
        logger.debug("Launched %s as PID %s", invocation.text, child.pid)
        return True

    def collect_finished(self) -> int:
        """Release exited children, returning how many are still running."""
        self._children = [child for child in self._children if child.poll() is None]
        return len(self._children)
