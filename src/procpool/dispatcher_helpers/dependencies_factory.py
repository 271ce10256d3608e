from __future__ import annotations

"""Dependency factory for Dispatcher."""


from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..admission_controller import AdmissionController
    from ..dispatcher_config import DispatcherConfig
    from ..process_launcher import DetachedLauncher


@dataclass
class DispatcherDependencies:
    """Container for all Dispatcher collaborators."""

    admission: "AdmissionController"
    launcher: "DetachedLauncher"


class DispatcherDependenciesFactory:
    """Factory for creating Dispatcher dependencies."""

    @staticmethod
    def create(config: "DispatcherConfig") -> DispatcherDependencies:
        """Create all dependencies for Dispatcher from its configuration."""
        from ..admission_controller import AdmissionController
        from ..process_census import create_census
        from ..process_launcher import DetachedLauncher
        from ..process_reaper import ProcessReaper

        admission = AdmissionController(
            create_census(config.census_backend),
            ProcessReaper(),
            base_command=config.base_command,
            max_concurrent=config.max_concurrent,
            max_process_age_seconds=config.max_process_age_seconds,
        )
        launcher = DetachedLauncher(config.output_sink)

        return DispatcherDependencies(admission=admission, launcher=launcher)
