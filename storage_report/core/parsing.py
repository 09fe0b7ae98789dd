"""
Parsing of the usage dump lines.

Each line has the form::

    DATACENTER HOST CATEGORY SUBJECT COUNT

for instance::

    us-east-1 ms-0042 /manta/1b3f..c2 1b3f..c2 4718592
    us-east-1 ms-0042 zones:used - - 913725440000
"""

import logging
import re
from collections.abc import Iterable, Iterator

from storage_report.core.models.usage import UsageRecord

logger = logging.getLogger(__name__)

NB_FIELDS = 5
_integer = re.compile(r"[+-]?[0-9]+")


class MalformedLineError(Exception):
    """Exception raised when a line cannot be turned into a UsageRecord."""

    def __init__(self, lineno: int, line: str, reason: str):
        super().__init__(f"line {lineno}: {reason}: {line!r}")
        self.lineno = lineno
        self.line = line
        self.reason = reason


def parse_line(lineno: int, line: str) -> UsageRecord | None:
    """Parse a single line, returning None for blank lines."""
    fields = line.split()
    if not fields:
        return None

    if len(fields) != NB_FIELDS:
        raise MalformedLineError(
            lineno, line, f"expected {NB_FIELDS} fields, got {len(fields)}"
        )

    datacenter, host, category, subject, count = fields
    if not _integer.fullmatch(count):
        raise MalformedLineError(lineno, line, f"count {count!r} is not an integer")

    return UsageRecord(
        datacenter=datacenter,
        host=host,
        category=category,
        subject=subject,
        count=int(count),
        lineno=lineno,
    )


def parse_lines(lines: Iterable[str]) -> Iterator[UsageRecord]:
    """Yield the valid records, warning about and skipping malformed lines."""
    for lineno, line in enumerate(lines, start=1):
        try:
            record = parse_line(lineno, line.rstrip("\n"))
        except MalformedLineError as err:
            logger.warning("Skipping malformed %s", err)
            continue
        if record is not None:
            yield record
