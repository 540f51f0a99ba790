"""levelmaker/errors.py — Load error taxonomy.

Fatal errors derive from ``LoadError`` and abort the whole load. Per-tile
problems during assembly are not exceptions; they are recorded as
``TileSkipped`` entries and the load carries on.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass


# ---------------------------------------------------------------------------
# Fatal errors
# ---------------------------------------------------------------------------

class LoadError(Exception):
    """Base class for errors that abort a level load."""


class ConfigMismatch(LoadError, ValueError):
    """Block identifiers and block geometries differ in length."""

    def __init__(self, id_count: int, block_count: int) -> None:
        self.id_count = id_count
        self.block_count = block_count
        super().__init__(
            f"Building blocks and ids differ: {id_count} ids, {block_count} blocks"
        )


class DecodeError(LoadError, ValueError):
    """The level text is not well-formed JSON."""


class SchemaViolation(LoadError, ValueError):
    """The decoded level does not match the level-array schema.

    Attributes:
        kind: Short machine-readable violation name.
        location: Index path into the level array, e.g. ``(4, 1, 0)``.
        log_level: Level the validator reports this violation at.
    """

    kind = "schema"
    log_level = logging.ERROR

    def __init__(self, message: str, location: tuple[int, ...] = ()) -> None:
        self.location = location
        super().__init__(message)


class WrongRootType(SchemaViolation):
    kind = "wrong_root_type"

    def __init__(self, actual: str) -> None:
        self.actual = actual
        super().__init__(f"Invalid data type: expected a list at the root, got {actual}")


class WrongTileShape(SchemaViolation):
    kind = "wrong_tile_shape"

    def __init__(self, index: int, details: str) -> None:
        self.index = index
        super().__init__(f"Invalid tile at [{index}]: {details}", (index,))


class WrongSlotShape(SchemaViolation):
    kind = "wrong_slot_shape"

    def __init__(self, tile_index: int, slot: int, details: str) -> None:
        self.tile_index = tile_index
        self.slot = slot
        super().__init__(
            f"Invalid block data at [{tile_index}][{slot}]: {details}",
            (tile_index, slot),
        )


class NonNumericLeaf(SchemaViolation):
    # Reported below ERROR, yet still aborts validation.
    kind = "non_numeric_leaf"
    log_level = logging.INFO

    def __init__(self, tile_index: int, slot: int, leaf: int, actual: str) -> None:
        self.tile_index = tile_index
        self.slot = slot
        self.leaf = leaf
        super().__init__(
            f"Expected number values at [{tile_index}][{slot}][{leaf}], got {actual}",
            (tile_index, slot, leaf),
        )


class UnknownIdentifier(SchemaViolation):
    kind = "unknown_identifier"
    # Also reported below ERROR.
    log_level = logging.INFO

    def __init__(self, tile_index: int, local_id: int, declared: tuple[int, int]) -> None:
        self.tile_index = tile_index
        self.local_id = local_id
        self.declared = declared
        super().__init__(
            f"Invalid ID found at [{tile_index}][0] "
            f"(local: {local_id}, declared: {declared[0]} {declared[1]})",
            (tile_index, 0),
        )


# ---------------------------------------------------------------------------
# Internal errors
# ---------------------------------------------------------------------------

class AssemblyInvariantError(RuntimeError):
    """A tile reached assembly with an identifier the validator should have rejected."""


# ---------------------------------------------------------------------------
# Non-fatal records
# ---------------------------------------------------------------------------

SKIP_INVALID_INDEX = "invalid_index"
SKIP_BUFFER_FULL = "buffer_full"


@dataclass
class TileSkipped:
    """A tile omitted from the merged output."""

    tile_index: int
    reason: str  # SKIP_INVALID_INDEX / SKIP_BUFFER_FULL
    details: str
