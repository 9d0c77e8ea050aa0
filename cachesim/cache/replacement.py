from __future__ import annotations
from typing import TYPE_CHECKING, NamedTuple, Sequence

if TYPE_CHECKING:
    from .cache import CacheSlot


class Candidate(NamedTuple):
    slot: "CacheSlot"
    hit: bool


def find_candidate(set_slots: Sequence["CacheSlot"], tag: int) -> Candidate:
    """
    Scans one set in ascending block-id order.

    Returns the first valid slot holding `tag` as a hit. Otherwise returns a
    victim: the first invalid slot, else the least recently used slot, with
    ties going to the lowest block id.
    """
    if not set_slots:
        raise ValueError("Cannot select a candidate from an empty set.")

    empty = None
    least_used = None
    for slot in set_slots:
        if slot.valid and slot.tag == tag:
            return Candidate(slot, True)
        if not slot.valid:
            if empty is None:
                empty = slot
        elif least_used is None or slot.last_used < least_used.last_used:
            least_used = slot

    return Candidate(empty if empty is not None else least_used, False)
