from __future__ import annotations
import re
from typing import Optional

from ..errors import ParseError
from .record import AccessKind, AccessRecord

# <hex instruction address>:<R|W> <hex memory address> <decimal byte count>
TRACE_LINE_RE = re.compile(
    r"^\s*(?P<instr>[0-9a-fA-F]+):(?P<kind>[RW])\s+(?P<addr>[0-9a-fA-F]+)\s+(?P<size>\d+)\s*$"
)


class TraceParser:
    """
    Turns trace lines into AccessRecords.

    The parser owns the run's order counter: it starts at 0 and advances by
    one for every successfully parsed line. A failed parse leaves it alone.
    """

    def __init__(self, start_order: int = 0):
        self.next_order = start_order
        self.lines_seen = 0

    def parse(self, line: str, line_number: Optional[int] = None) -> Optional[AccessRecord]:
        """Parses one line. Returns None for a blank line, raises ParseError for a bad one."""
        self.lines_seen += 1
        if line_number is None:
            line_number = self.lines_seen
        if not line.strip():
            return None

        m = TRACE_LINE_RE.match(line)
        if m is None:
            raise ParseError(line, line_number, self.next_order)

        record = AccessRecord(
            order=self.next_order,
            instr_address=int(m.group("instr"), 16),
            mem_address=int(m.group("addr"), 16),
            num_bytes=int(m.group("size")),
            kind=AccessKind(m.group("kind")),
        )
        self.next_order += 1
        return record
