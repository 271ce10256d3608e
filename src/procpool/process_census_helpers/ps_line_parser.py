"""Parser for ``ps -eo pid,lstart,command`` output lines.

Each line has the shape::

    <pid> <weekday> <month> <day> <HH:MM:SS> <year> <command text>

The trailing ``=`` in each column suppresses the header row. ``lstart`` is
rendered in the C locale, so the census runs ``ps`` with
``LC_ALL=C`` and parses the timestamp with a fixed English format.
"""

from __future__ import annotations

import re
from datetime import datetime

from ..errors import CensusLineError
from ..process_models import ProcessRecord

PS_COMMAND = ("ps", "-eo", "pid=,lstart=,command=")

_LINE_PATTERN = re.compile(r"^(\d+)\s+(\w+\s+\w+\s+\d+\s+\d+:\d+:\d+\s+\d+)\s+(.*)$")
_LSTART_FORMAT = "%a %b %d %H:%M:%S %Y"


def parse_ps_line(line: str) -> ProcessRecord:
    """
    Parse one process-table line into a ProcessRecord.

    Args:
        line: Raw line from ``ps -eo pid,lstart,command``

    Returns:
        ProcessRecord with the start time as local epoch seconds

    Raises:
        CensusLineError: If the line does not match the expected structure
    """
    match = _LINE_PATTERN.match(line.strip())
    if match is None:
        raise CensusLineError(line)

    pid_text, lstart_text, command_line = match.groups()
    pid = int(pid_text)
    if pid <= 0:
        raise CensusLineError(line, reason="Non-positive pid")

    try:
        started = datetime.strptime(" ".join(lstart_text.split()), _LSTART_FORMAT)
    except ValueError as exc:
        raise CensusLineError(line, reason="Unparsable start time") from exc

    return ProcessRecord(pid=pid, start_time=started.timestamp(), command_line=command_line)
