from __future__ import annotations
from typing import List

from ..trace.record import AccessOutcome, AccessRecord, SlotSnapshot
from .address import decode_address
from .cache_config import CacheGeometry
from .replacement import Candidate, find_candidate
from .stats import CacheStatistics

MISS_PENALTY = 80


class CacheSlot:
    """Represents a single block slot in a cache set."""
    def __init__(self, block_id: int):
        self.valid = False
        self.dirty = False
        self.tag = 0
        self.last_used = 0
        self.block_id = block_id

    def snapshot(self) -> SlotSnapshot:
        return SlotSnapshot(
            valid=self.valid,
            dirty=self.dirty,
            tag=self.tag,
            block_id=self.block_id,
            last_used=self.last_used,
        )

    def __repr__(self):
        return (f"CacheSlot(block_id={self.block_id}, valid={int(self.valid)}, "
                f"dirty={int(self.dirty)}, tag={self.tag:#x}, last_used={self.last_used})")


class Cache:
    """
    A single-level write-back, write-allocate cache.

    Direct-mapped is the associativity=1 case of the same set/victim logic.
    Slots live in one flat list; set `n` is the slice starting at
    `n * associativity`.
    """
    def __init__(self, geometry: CacheGeometry, miss_penalty: int = MISS_PENALTY):
        self.geometry = geometry
        self.miss_penalty = miss_penalty
        self.stats = CacheStatistics()
        assoc = geometry.associativity
        self.slots: List[CacheSlot] = [CacheSlot(i % assoc) for i in range(geometry.num_blocks)]

    def decode(self, record: AccessRecord) -> AccessRecord:
        """Fills in tag, index and set number for a parsed access."""
        record.tag, record.index, record.set_number = decode_address(record.mem_address, self.geometry)
        return record

    def set_slots(self, set_number: int) -> List[CacheSlot]:
        assoc = self.geometry.associativity
        start = set_number * assoc
        if start < 0 or start + assoc > len(self.slots):
            raise IndexError(f"Set {set_number} is outside the cache ({len(self.slots)} slots).")
        return self.slots[start:start + assoc]

    def probe(self, record: AccessRecord) -> Candidate:
        """Returns the hit slot for the access, or the victim to replace."""
        if record.tag is None:
            self.decode(record)
        return find_candidate(self.set_slots(record.set_number), record.tag)

    def evaluate(self, record: AccessRecord) -> AccessRecord:
        """Classifies the access, updates the chosen slot and the statistics."""
        slot, hit = self.probe(record)
        record.prior = slot.snapshot()
        record.hit = hit

        if record.is_read:
            self.stats.reads += 1
        else:
            self.stats.writes += 1
        slot.last_used = record.order

        if hit:
            record.cycles = 1
            record.outcome = AccessOutcome.HIT
            if record.is_write:
                slot.dirty = True
        elif not slot.dirty:
            record.cycles = 1 + self.miss_penalty
            record.outcome = AccessOutcome.MISS_CLEAN
            self.fill_line(slot, record)
        else:
            # Evicted block is written back before the new one is fetched
            record.cycles = 1 + 2 * self.miss_penalty
            record.outcome = AccessOutcome.MISS_DIRTY
            self.stats.bytes_written += self.geometry.block_size
            if record.is_read:
                self.stats.dirty_read_misses += 1
            else:
                self.stats.dirty_write_misses += 1
            self.fill_line(slot, record)

        if record.is_read:
            self.stats.read_access_time += record.cycles
        else:
            self.stats.write_access_time += record.cycles
        return record

    def fill_line(self, slot: CacheSlot, record: AccessRecord):
        """Brings the accessed block into `slot`. Write misses fetch the block too."""
        slot.valid = True
        slot.tag = record.tag
        slot.dirty = record.is_write
        self.stats.bytes_read += self.geometry.block_size
        if record.is_read:
            self.stats.read_misses += 1
        else:
            self.stats.write_misses += 1
