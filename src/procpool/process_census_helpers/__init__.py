"""Helpers for matching and parsing process-table entries."""

from .command_matcher import build_command_pattern, matches_command
from .ps_line_parser import PS_COMMAND, parse_ps_line

__all__ = [
    "PS_COMMAND",
    "build_command_pattern",
    "matches_command",
    "parse_ps_line",
]
