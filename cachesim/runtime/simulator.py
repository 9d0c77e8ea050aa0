from __future__ import annotations
import itertools
from dataclasses import dataclass, field, replace
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Any

import pandas as pd

from ..cache.cache import Cache
from ..cache.cache_config import CacheGeometry
from ..cache.stats import CacheSummary
from ..config import SimConfig
from ..errors import ConfigurationError
from ..trace.parser import TraceParser
from ..trace.reader import iter_trace_lines
from ..trace.record import AccessRecord
from ..utils.logging import get_logger
from ..utils.reporting import format_verbose_line

logger = get_logger(__name__)

SWEEP_COLUMNS = [
    "size_kb", "associativity", "block_size",
    "reads", "writes", "read_misses", "write_misses",
    "dirty_read_misses", "dirty_write_misses", "bytes_read", "bytes_written",
    "read_access_time", "write_access_time",
    "total_accesses", "total_misses", "total_time", "miss_rate",
]


@dataclass
class SimulationResult:
    geometry: CacheGeometry
    summary: CacheSummary
    timeline: List[Dict[str, Any]] = field(default_factory=list)


class SimulationSession:
    """
    State for exactly one simulation run: the parser with its order
    counter, the cache, and the sampled miss-rate timeline.
    """

    def __init__(self, config: SimConfig):
        self.config = config
        self.geometry = config.geometry()
        self.parser = TraceParser()
        self.cache = Cache(self.geometry, miss_penalty=config.miss_penalty)
        self.timeline: List[Dict[str, Any]] = []
        self._last_record: Optional[AccessRecord] = None

    def step(self, line: str, line_number: Optional[int] = None) -> Optional[AccessRecord]:
        """Parses, decodes and evaluates one trace line."""
        record = self.parser.parse(line, line_number)
        if record is None:
            return None
        self.cache.decode(record)
        self.cache.evaluate(record)
        logger.debug("access %d: set=%d tag=%#x case=%s", record.order,
                     record.set_number, record.tag, record.case_code)

        self._last_record = record
        if (record.order + 1) % self.config.timeline_interval == 0:
            self._sample(record)
        return record

    def in_verbose_range(self, record: AccessRecord) -> bool:
        return self.config.verbose and self.config.verbose_lo <= record.order <= self.config.verbose_hi

    def _sample(self, record: AccessRecord):
        stats = self.cache.stats
        self.timeline.append({
            'order': record.order,
            'accesses': stats.total_accesses,
            'misses': stats.total_misses,
            'miss_rate': stats.total_misses / stats.total_accesses,
            'total_time': stats.read_access_time + stats.write_access_time,
        })

    def finish(self) -> SimulationResult:
        last = self._last_record
        if last is not None and (not self.timeline or self.timeline[-1]['order'] != last.order):
            self._sample(last)
        return SimulationResult(self.geometry, self.cache.stats.summarize(), list(self.timeline))


def run(config: SimConfig,
        lines: Optional[Iterable[Tuple[int, str]]] = None,
        emit: Callable[[str], Any] = print) -> SimulationResult:
    """
    Runs one simulation over the configured trace.

    `lines` defaults to the numbered lines of `config.trace_file`. Verbose
    lines for accesses inside the configured order range go to `emit`.
    """
    session = SimulationSession(config)
    logger.info("Simulating %s on %s", session.geometry.label, config.trace_file or "<lines>")

    if lines is None:
        lines = iter_trace_lines(config.trace_file)
    for line_number, line in lines:
        record = session.step(line, line_number)
        if record is not None and session.in_verbose_range(record):
            emit(format_verbose_line(record))

    return session.finish()


def sweep(config: SimConfig, lines: Optional[List[Tuple[int, str]]] = None) -> pd.DataFrame:
    """Runs one fresh simulation per (size, associativity) pair and tabulates the summaries."""
    rows = []
    for size_kb, assoc in itertools.product(config.sweep_sizes_kb, config.sweep_associativities):
        point = replace(config, cache_size_kb=size_kb, associativity=assoc, verbose=False)
        try:
            point.geometry()
        except ConfigurationError as e:
            logger.warning("Skipping %dKB %d-way: %s", size_kb, assoc, e)
            continue

        result = run(point, lines=lines)
        logger.info("%s: miss rate %s", result.geometry.label, result.summary.miss_rate)
        row = {
            'size_kb': size_kb,
            'associativity': assoc,
            'block_size': config.block_size,
        }
        row.update(result.summary.to_dict())
        rows.append(row)

    return pd.DataFrame(rows, columns=SWEEP_COLUMNS)
