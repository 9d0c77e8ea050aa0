from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional


@dataclass
class CacheStatistics:
    """Running counters for one simulation. Only the cache updates these."""
    reads: int = 0
    writes: int = 0
    read_misses: int = 0
    write_misses: int = 0
    dirty_read_misses: int = 0
    dirty_write_misses: int = 0
    bytes_read: int = 0
    bytes_written: int = 0
    read_access_time: int = 0
    write_access_time: int = 0

    @property
    def total_accesses(self) -> int:
        return self.reads + self.writes

    @property
    def total_misses(self) -> int:
        return self.read_misses + self.write_misses

    def summarize(self) -> CacheSummary:
        total_accesses = self.total_accesses
        total_misses = self.total_misses
        # No accesses means no meaningful ratio
        miss_rate = total_misses / total_accesses if total_accesses else None
        return CacheSummary(
            statistics=CacheStatistics(**asdict(self)),
            total_accesses=total_accesses,
            total_misses=total_misses,
            total_time=self.read_access_time + self.write_access_time,
            miss_rate=miss_rate,
        )

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


@dataclass(frozen=True)
class CacheSummary:
    """End-of-run figures derived from a statistics snapshot."""
    statistics: CacheStatistics
    total_accesses: int
    total_misses: int
    total_time: int
    miss_rate: Optional[float]

    @property
    def has_accesses(self) -> bool:
        return self.total_accesses > 0

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = self.statistics.to_dict()
        data.update({
            "total_accesses": self.total_accesses,
            "total_misses": self.total_misses,
            "total_time": self.total_time,
            "miss_rate": self.miss_rate,
        })
        return data
