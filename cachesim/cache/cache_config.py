from __future__ import annotations
from dataclasses import dataclass, field

from ..errors import ConfigurationError

SIZE_FACTOR = 1024
DEFAULT_BLOCK_SIZE = 16


def is_power_of_two(n: int) -> bool:
    return (n > 0) and (n & (n - 1) == 0)


def ceil_log2(n: int) -> int:
    """Smallest k with 2**k >= n, for n >= 1."""
    return (n - 1).bit_length()


@dataclass
class CacheGeometry:
    """Geometry of a single-level cache. Fixed once constructed."""
    size_kb: int = 1
    block_size: int = DEFAULT_BLOCK_SIZE
    associativity: int = 1

    # Derived properties
    size_bytes: int = field(init=False)
    num_blocks: int = field(init=False)
    num_sets: int = field(init=False)
    offset_bits: int = field(init=False)
    assoc_bits: int = field(init=False)
    index_bits: int = field(init=False)

    def __post_init__(self):
        for name in ("size_kb", "block_size", "associativity"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise ConfigurationError(f"{name} must be an integer, got {value!r}.")
        if not self.size_kb > 0:
            raise ConfigurationError(f"Cache size must be positive, got {self.size_kb}KB.")
        if not is_power_of_two(self.block_size):
            raise ConfigurationError(f"Block size must be a power of two, got {self.block_size}.")
        if not self.associativity >= 1:
            raise ConfigurationError(f"Associativity must be at least 1, got {self.associativity}.")

        self.size_bytes = self.size_kb * SIZE_FACTOR
        blocks_needed = self.size_bytes // self.block_size
        if blocks_needed < 1:
            raise ConfigurationError(
                f"Block size {self.block_size} is larger than the cache ({self.size_bytes} bytes).")

        # Non power-of-two block counts are rounded up, not rejected.
        block_bits = ceil_log2(blocks_needed)
        self.num_blocks = 1 << block_bits
        if self.associativity > self.num_blocks:
            raise ConfigurationError(
                f"Associativity {self.associativity} exceeds the number of blocks ({self.num_blocks}).")

        self.offset_bits = self.block_size.bit_length() - 1
        self.assoc_bits = ceil_log2(self.associativity)
        # Equals num_blocks // associativity when associativity is a power of two
        self.num_sets = self.num_blocks >> self.assoc_bits
        self.index_bits = block_bits - self.assoc_bits

    @property
    def is_direct_mapped(self) -> bool:
        return self.associativity == 1

    @property
    def label(self) -> str:
        return f"{self.associativity}-way, writeback, size = {self.size_kb}KB"

    def to_dict(self) -> dict:
        return {
            "size_kb": self.size_kb,
            "size_bytes": self.size_bytes,
            "block_size": self.block_size,
            "associativity": self.associativity,
            "num_blocks": self.num_blocks,
            "num_sets": self.num_sets,
            "offset_bits": self.offset_bits,
            "assoc_bits": self.assoc_bits,
            "index_bits": self.index_bits,
        }
