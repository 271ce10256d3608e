"""Helper modules for Dispatcher."""

from .dependencies_factory import DispatcherDependencies, DispatcherDependenciesFactory

__all__ = ["DispatcherDependencies", "DispatcherDependenciesFactory"]
