"""Command-line entry point.

Usage:
    procpool "php worker.php" --max-concurrent 3 --commands jobs.txt

Each non-blank line of the commands file (stdin by default) holds the
arguments for one invocation of the base command, split with shell rules.
"""

from __future__ import annotations

import argparse
import logging
import shlex
import sys
from typing import IO, Iterator, List, Optional, Sequence

from .config import ConfigurationError, env_bool
from .dispatcher import Dispatcher
from .dispatcher_config import DispatcherConfig
from .logging_config import setup_logging
from .process_census import CENSUS_BACKENDS

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CONFIG_ERROR = 2
EXIT_INTERRUPTED = 130


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="procpool", description="Run queued commands as detached processes with a concurrency ceiling")
    parser.add_argument("base_command", nargs="?", help="Base command; falls back to PROCPOOL_BASE_COMMAND")
    parser.add_argument("--max-concurrent", type=int, help="Maximum simultaneous processes")
    parser.add_argument("--poll-interval-ms", type=int, help="Delay between slot checks in milliseconds")
    parser.add_argument("--max-process-age-ms", type=int, help="Age after which a running process is terminated")
    parser.add_argument("--poll-limit", type=int, help="Slot checks before the remaining queue is abandoned")
    parser.add_argument("--output", dest="output_sink", help="File that receives launched process output")
    parser.add_argument("--census", dest="census_backend", choices=CENSUS_BACKENDS, help="Process listing backend")
    parser.add_argument("--commands", type=argparse.FileType("r"), default=None, help="Commands file (default: stdin)")
    parser.add_argument("--log-file", help="Append log output to this file")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def read_commands(stream: IO[str]) -> Iterator[List[str]]:
    """Yield argument lists from *stream*, skipping blank lines and ``#`` comments."""
    for line in stream:
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        yield shlex.split(stripped)


_OVERRIDABLE = ("max_concurrent", "poll_interval_ms", "max_process_age_ms", "poll_limit", "output_sink", "census_backend")


def _resolve_config(args: argparse.Namespace) -> DispatcherConfig:
    overrides = {name: getattr(args, name) for name in _OVERRIDABLE}
    return DispatcherConfig.from_env(args.base_command, **overrides)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    try:
        verbose = args.verbose or bool(env_bool("PROCPOOL_VERBOSE", or_value=False))
        setup_logging(args.log_file, verbose=verbose)
        config = _resolve_config(args)
        pool = Dispatcher(config)
        stream = args.commands if args.commands is not None else sys.stdin
        pool.enqueue_many(read_commands(stream))
    except (ConfigurationError, ValueError) as exc:
        print(f"procpool: {exc}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    try:
        pool.execute()
    except KeyboardInterrupt:
        pool.stop()
        logger.info("Interrupted: %d commands left unexecuted", len(pool))
        return EXIT_INTERRUPTED

    if len(pool):
        logger.info("%d commands were not dispatched", len(pool))
    return EXIT_OK
