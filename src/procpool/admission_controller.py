"""Slot availability check that prunes stale processes as a side effect."""

from __future__ import annotations

import logging

from .process_census import ProcessCensus
from .process_models import ReapOutcome
from .process_reaper import ProcessReaper

logger = logging.getLogger(__name__)


class AdmissionController:
    """
    Decides whether another instance of the base command may be launched.

    Every call re-queries the process table because launched processes are
    detached and unsupervised. Stale records are reaped before the count is
    compared to the ceiling.
    """

    def __init__(
        self,
        census: ProcessCensus,
        reaper: ProcessReaper,
        *,
        base_command: str,
        max_concurrent: int,
        max_process_age_seconds: float,
    ):
        self._census = census
        self._reaper = reaper
        self.base_command = base_command
        self.max_concurrent = max_concurrent
        self.max_process_age_seconds = max_process_age_seconds

    def slot_available(self) -> bool:
        records = self._census.census(self.base_command)

        killed = 0
        for record in records:
            if self._reaper.reap(record, self.max_process_age_seconds) is ReapOutcome.KILLED:
                killed += 1

        logger.debug(
            "Census found %d %s processes (%d signalled), ceiling %d",
            len(records),
            self.base_command,
            killed,
            self.max_concurrent,
        )
        return len(records) < self.max_concurrent
