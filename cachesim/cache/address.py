from __future__ import annotations
from typing import NamedTuple

from .cache_config import CacheGeometry


class DecodedAddress(NamedTuple):
    tag: int
    index: int
    set_number: int


def decode_address(address: int, geometry: CacheGeometry) -> DecodedAddress:
    """
    Splits a memory address into tag, index and set number.

    The index is the `index_bits` field directly above the block offset; the
    set number drops the low `assoc_bits` of the index. For a direct-mapped
    cache `assoc_bits` is 0, so the set number equals the index.
    """
    low_order_bits = geometry.index_bits + geometry.offset_bits
    tag = address >> low_order_bits
    index = (address >> geometry.offset_bits) & ((1 << geometry.index_bits) - 1)
    set_number = index >> geometry.assoc_bits
    return DecodedAddress(tag, index, set_number)
