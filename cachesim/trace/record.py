from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class AccessKind(Enum):
    READ = "R"
    WRITE = "W"


class AccessOutcome(Enum):
    """Classification of an evaluated access; the value is its case code."""
    HIT = "1"
    MISS_CLEAN = "2a"
    MISS_DIRTY = "2b"

    @property
    def is_miss(self) -> bool:
        return self is not AccessOutcome.HIT


@dataclass(frozen=True)
class SlotSnapshot:
    """State of the examined slot before the access mutated it."""
    valid: bool
    dirty: bool
    tag: int
    block_id: int
    last_used: int


@dataclass
class AccessRecord:
    """
    One memory access from the trace.

    Filled in three steps: the parser sets the raw fields, the address
    decoder sets tag/index/set_number, and the cache fills the outcome.
    """
    order: int
    instr_address: int
    mem_address: int
    num_bytes: int
    kind: AccessKind

    tag: Optional[int] = None
    index: Optional[int] = None
    set_number: Optional[int] = None

    hit: bool = False
    outcome: Optional[AccessOutcome] = None
    prior: Optional[SlotSnapshot] = None
    cycles: int = 0

    @property
    def is_read(self) -> bool:
        return self.kind is AccessKind.READ

    @property
    def is_write(self) -> bool:
        return self.kind is AccessKind.WRITE

    @property
    def case_code(self) -> str:
        return self.outcome.value if self.outcome is not None else ""
