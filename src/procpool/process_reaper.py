"""Terminate managed processes that outlive their time budget."""

from __future__ import annotations

import logging
import time
from typing import Callable

from .process_models import ProcessRecord, ReapOutcome
from .process_reaper_helpers import terminate_pid

logger = logging.getLogger(__name__)


class ProcessReaper:
    """Checks a census record against a maximum age and signals it when stale."""

    def __init__(
        self,
        terminator: Callable[[int], bool] = terminate_pid,
        clock: Callable[[], float] = time.time,
    ):
        self._terminator = terminator
        self._clock = clock

    def reap(self, record: ProcessRecord, max_age_seconds: float) -> ReapOutcome:
        age = record.age_seconds(self._clock())
        if age <= max_age_seconds:
            return ReapOutcome.NOT_EXPIRED

        if self._terminator(record.pid):
            logger.info("%s over time and was killed", record.pid)
            return ReapOutcome.KILLED

        logger.info("Unable to kill PID: %s", record.pid)
        return ReapOutcome.KILL_FAILED
