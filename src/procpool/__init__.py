"""Bounded-concurrency dispatcher for detached external commands."""

from .admission_controller import AdmissionController
from .config import ConfigurationError
from .dispatcher import Dispatcher
from .dispatcher_config import DispatcherConfig
from .process_census import ProcessCensus, PsTableCensus, PsutilCensus, create_census
from .process_launcher import DetachedLauncher
from .process_models import CommandInvocation, ProcessRecord, ReapOutcome
from .process_reaper import ProcessReaper

__all__ = [
    "AdmissionController",
    "CommandInvocation",
    "ConfigurationError",
    "DetachedLauncher",
    "Dispatcher",
    "DispatcherConfig",
    "ProcessCensus",
    "ProcessReaper",
    "ProcessRecord",
    "PsTableCensus",
    "PsutilCensus",
    "ReapOutcome",
    "create_census",
]
