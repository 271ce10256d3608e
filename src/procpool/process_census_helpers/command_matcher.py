"""Whole-word matching of the base command against process command lines."""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Pattern, Sequence, Union


@lru_cache(maxsize=32)
def build_command_pattern(base_command: str) -> Pattern[str]:
    """Compile a case-sensitive pattern that finds *base_command* bounded by non-word characters."""
    return re.compile(r"(?<!\w)" + re.escape(base_command) + r"(?!\w)")


def matches_command(command_line: Union[str, Sequence[str]], base_command: str) -> bool:
    if not base_command:
        return False
    if not isinstance(command_line, str):
        command_line = " ".join(command_line)
    if not command_line:
        return False
    return build_command_pattern(base_command).search(command_line) is not None
