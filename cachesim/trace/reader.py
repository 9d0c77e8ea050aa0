from __future__ import annotations
from pathlib import Path
from typing import Iterator, Tuple, Union


def iter_trace_lines(path: Union[str, Path]) -> Iterator[Tuple[int, str]]:
    """
    Yields (line_number, line) pairs from a trace file, one at a time.

    Undecodable bytes become U+FFFD, so such a line fails in the parser
    with its line number rather than aborting the read.
    """
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        for line_number, line in enumerate(f, start=1):
            yield line_number, line
