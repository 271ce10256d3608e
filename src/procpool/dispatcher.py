"""
Bounded-concurrency dispatcher for detached command executions.

Commands are attempted strictly in enqueue order. For each one the
dispatcher polls the admission controller until a slot frees up, then
launches the command in the background and moves on. When the poll limit
is exhausted the whole run stops and the remaining commands stay queued.

Usage:
    from procpool import Dispatcher, DispatcherConfig

    pool = Dispatcher(DispatcherConfig("php worker.php", max_concurrent=3))
    pool.enqueue(["--job", "42"])
    pool.execute()
"""

from __future__ import annotations

import logging
import os
import threading
from collections import deque
from typing import Deque, Iterable, Optional, Sequence, Tuple

from .dispatcher_config import DispatcherConfig
from .dispatcher_helpers import DispatcherDependencies, DispatcherDependenciesFactory
from .process_models import CommandInvocation

logger = logging.getLogger(__name__)


class Dispatcher:
    """Owns the command queue and drives admission polling and launches."""

    def __init__(
        self,
        config: DispatcherConfig,
        *,
        dependencies: Optional[DispatcherDependencies] = None,
    ):
        self.config = config
        deps = dependencies if dependencies is not None else DispatcherDependenciesFactory.create(config)
        self._admission = deps.admission
        self._launcher = deps.launcher
        self._queue: Deque[CommandInvocation] = deque()
        self._stop_event = threading.Event()

        logger.info("(PID %s) %s pool instantiated", os.getpid(), config.base_command)

    def __len__(self) -> int:
        return len(self._queue)

    @property
    def pending(self) -> Tuple[CommandInvocation, ...]:
        return tuple(self._queue)

    def enqueue(self, args: Sequence[str]) -> CommandInvocation:
        """Append one argument list to the queue."""
        if isinstance(args, str):
            raise TypeError("enqueue expects a sequence of arguments, not a single string")
        invocation = CommandInvocation(self.config.base_command, tuple(str(arg) for arg in args))
        self._queue.append(invocation)
        return invocation

    def enqueue_many(self, commands: Iterable[Sequence[str]]) -> None:
        for args in commands:
            self.enqueue(args)

    def stop(self) -> None:
        """Interrupt a pending poll wait; the current ``execute`` returns with the queue intact."""
        self._stop_event.set()

    def execute(self) -> None:
        """Drain the queue in order, launching each command once a slot is free."""
        self._stop_event.clear()
        while self._queue:
            invocation = self._queue[0]
            if not self._acquire_slot(invocation):
                return
            self._launcher.launch(invocation)
            self._queue.popleft()

    def _acquire_slot(self, invocation: CommandInvocation) -> bool:
        logger.info("Checking for slot for command %s", invocation.text)

        polls = 0
        while True:
            self._launcher.collect_finished()
            if self._admission.slot_available():
                logger.info("Found slot for command %s", invocation.text)
                return True

            logger.info("No available slots. Pausing before checking again.")
            if self._stop_event.wait(self.config.poll_interval_seconds):
                logger.info("Stop requested: leaving %d commands queued", len(self._queue))
                return False

            polls += 1
            if polls > self.config.poll_limit:
                logger.info("Hit slot check count limit: stopping dispatch.")
                return False


__all__ = ["Dispatcher"]
