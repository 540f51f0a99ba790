"""levelmaker/codec.py — Packed block identifiers.

A level declares each tile's block as an ``(x, y)`` integer pair. The pair is
packed into one signed 32-bit key, the same key the block table stores, by
keeping the low 16 bits of each axis. Values outside ``[0, 65535]`` are masked
rather than rejected, so distinct out-of-range pairs can collide; existing
block tables depend on this packing, so it is kept bit-for-bit.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence

AXIS_MASK = 0xFFFF
AXIS_BITS = 16


def to_int32(value: int) -> int:
    """Reinterpret the low 32 bits of *value* as a signed integer."""
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value


def pack(x: int, y: int) -> int:
    """Pack an identifier pair into a signed 32-bit key."""
    return to_int32((x & AXIS_MASK) | ((y & AXIS_MASK) << AXIS_BITS))


def unpack(key: int) -> tuple[int, int]:
    """Split a packed key back into its ``(x, y)`` pair (each in 0–65535)."""
    key &= 0xFFFFFFFF
    return key & AXIS_MASK, (key >> AXIS_BITS) & AXIS_MASK


def pack_pair(x: float, y: float) -> int:
    """Floor a pair of decoded numbers and pack them."""
    return pack(math.floor(x), math.floor(y))


def resolve(key: int, identifiers: Sequence[int]) -> Optional[int]:
    """Return the index of the first identifier equal to *key*, or None.

    Duplicate identifiers are not rejected; the earliest one wins.
    """
    for i, ident in enumerate(identifiers):
        if ident == key:
            return i
    return None
