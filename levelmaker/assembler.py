"""levelmaker/assembler.py — Merge placed block geometry into one static mesh.

Re-reads each tile of an already validated level, places every sub-part of
the tile's block at ``(x, -y, 0)`` (level rows grow downwards, the mesh's Y
axis grows upwards) and stages it in a fixed-capacity merge buffer. The
staged entries are then combined into a single mesh which doubles as the
collision mesh.

A tile that cannot be placed (bad block index, no buffer room) is skipped
and reported; it never aborts the load.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Iterable, Optional

import numpy as np

from levelmaker.blocks import BlockMesh, BlockTable
from levelmaker.codec import pack
from levelmaker.errors import (
    SKIP_BUFFER_FULL,
    SKIP_INVALID_INDEX,
    AssemblyInvariantError,
    TileSkipped,
)
from levelmaker.tokens import ListToken, NumberToken, Token

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TileRecord:
    """One level entry: declared block identifier and 2D position."""

    identifier: tuple[int, int]
    position: tuple[float, float]

    @property
    def local_id(self) -> int:
        return pack(*self.identifier)

    @property
    def placement(self) -> tuple[float, float, float]:
        x, y = self.position
        return (x, -y, 0.0)


@dataclass(frozen=True, eq=False)
class MergeEntry:
    """One block sub-part staged for merging, with its placement transform."""

    block: BlockMesh
    sub_part: int
    transform: np.ndarray  # (4, 4)


@dataclass(frozen=True)
class MergePolicy:
    merge_sub_meshes: bool = True
    use_transforms: bool = True
    recenter: bool = False


STATIC_MERGE = MergePolicy()
"""Static map policy: apply placements, one merged sub-part, keep world origin."""


@dataclass
class CombinedMesh:
    """Merged output geometry."""

    vertices: np.ndarray  # (N, 3) float64
    sub_parts: list[np.ndarray] = field(default_factory=list)  # each (K, 3) int64

    @property
    def triangles(self) -> np.ndarray:
        if not self.sub_parts:
            return np.zeros((0, 3), dtype=np.int64)
        return np.vstack(self.sub_parts)

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def triangle_count(self) -> int:
        return sum(len(p) for p in self.sub_parts)

    @property
    def bounds(self) -> Optional[tuple[np.ndarray, np.ndarray]]:
        """Axis-aligned ``(min, max)`` corners, or None for an empty mesh."""
        if not len(self.vertices):
            return None
        return self.vertices.min(axis=0), self.vertices.max(axis=0)


@dataclass
class MeshCollider:
    """Collision slot; shares its mesh with the render output."""

    shared_mesh: Optional[CombinedMesh] = None


@dataclass
class Assembly:
    mesh: CombinedMesh
    collider: MeshCollider
    skipped: list[TileSkipped]
    entry_count: int


# ---------------------------------------------------------------------------
# Merge buffer
# ---------------------------------------------------------------------------

class MergeBuffer:
    """Preallocated, append-only staging area of fixed capacity."""

    def __init__(self, capacity: int) -> None:
        if capacity < 0:
            raise ValueError(f"Merge buffer capacity must be >= 0, got {capacity}")
        self.capacity = capacity
        self._entries: list[Optional[MergeEntry]] = [None] * capacity
        self.used = 0

    def __len__(self) -> int:
        return self.used

    @property
    def full(self) -> bool:
        return self.used >= self.capacity

    def append(self, entry: MergeEntry) -> bool:
        """Store *entry*; returns False without writing when full."""
        if self.full:
            return False
        self._entries[self.used] = entry
        self.used += 1
        return True

    def compact(self) -> list[MergeEntry]:
        """Entries actually written, without trailing empty slots."""
        if self.used == self.capacity:
            return self._entries  # type: ignore[return-value]
        return self._entries[:self.used]  # type: ignore[return-value]


# ---------------------------------------------------------------------------
# Geometry helpers
# ---------------------------------------------------------------------------

def translation(position: Iterable[float]) -> np.ndarray:
    """4x4 homogeneous translation matrix (read-only)."""
    m = np.eye(4)
    m[:3, 3] = tuple(position)
    m.flags.writeable = False
    return m


def _place(vertices: np.ndarray, transform: np.ndarray) -> np.ndarray:
    homo = np.hstack([vertices, np.ones((len(vertices), 1))])
    return (homo @ transform.T)[:, :3]


def combine(entries: Iterable[MergeEntry], policy: MergePolicy = STATIC_MERGE) -> CombinedMesh:
    """Combine staged sub-parts into one mesh.

    Each entry contributes only the vertices its triangles reference. With
    ``merge_sub_meshes`` all triangles land in a single sub-part, otherwise
    every entry keeps its own.
    """
    vertex_chunks: list[np.ndarray] = []
    part_chunks: list[np.ndarray] = []
    offset = 0
    for entry in entries:
        tris = entry.block.sub_parts[entry.sub_part]
        used, remap = np.unique(tris.ravel(), return_inverse=True)
        verts = entry.block.vertices[used]
        if policy.use_transforms:
            verts = _place(verts, entry.transform)
        vertex_chunks.append(verts)
        part_chunks.append(remap.reshape(-1, 3).astype(np.int64) + offset)
        offset += len(verts)

    if vertex_chunks:
        vertices = np.vstack(vertex_chunks)
    else:
        vertices = np.zeros((0, 3), dtype=np.float64)

    if policy.recenter and len(vertices):
        center = (vertices.min(axis=0) + vertices.max(axis=0)) / 2.0
        vertices = vertices - center

    if policy.merge_sub_meshes:
        sub_parts = [np.vstack(part_chunks)] if part_chunks else []
    else:
        sub_parts = part_chunks
    return CombinedMesh(vertices=vertices, sub_parts=sub_parts)


# ---------------------------------------------------------------------------
# Assembly
# ---------------------------------------------------------------------------

def read_tile(token: Token) -> TileRecord:
    """Extract a TileRecord from a validated ``[[idX, idY], [x, y]]`` token.

    Raises:
        AssemblyInvariantError: The token does not have the validated shape.
    """
    if not (
        isinstance(token, ListToken)
        and len(token) == 2
        and all(isinstance(slot, ListToken) and len(slot) == 2 for slot in token.items)
        and all(isinstance(v, NumberToken) for slot in token.items for v in slot.items)
    ):
        raise AssemblyInvariantError(
            "Tile is not a [[idX, idY], [x, y]] number pair; "
            "level was not validated before assembly"
        )
    ident, pos = token[0], token[1]
    return TileRecord(
        identifier=(math.floor(ident[0].value), math.floor(ident[1].value)),
        position=(pos[0].value, pos[1].value),
    )


def add_block(
    buffer: MergeBuffer,
    table: BlockTable,
    object_index: int,
    position: tuple[float, float, float],
    tile_index: int,
) -> Optional[TileSkipped]:
    """Stage every sub-part of block *object_index* at *position*.

    A block is staged whole or not at all: if its sub-parts do not all fit in
    the remaining capacity, nothing is written and the tile is skipped.

    Returns:
        None if every sub-part was staged, otherwise the skip record.
    """
    if object_index < 0 or object_index >= len(table.blocks):
        logger.warning("Invalid object index %d for tile %d", object_index, tile_index)
        return TileSkipped(tile_index, SKIP_INVALID_INDEX, f"object index {object_index}")

    if buffer.full:
        logger.warning(
            "Too many merge entries for tile %d: %d >= %d",
            tile_index, buffer.used, buffer.capacity,
        )
        return TileSkipped(tile_index, SKIP_BUFFER_FULL, f"buffer full at {buffer.capacity}")

    block = table.blocks[object_index]
    logger.debug("Adding %s at %s", block.name, position)

    if buffer.used + block.sub_part_count > buffer.capacity:
        logger.warning(
            "Tile %d skipped: %d sub-parts of %s do not fit (%d of %d used)",
            tile_index, block.sub_part_count, block.name, buffer.used, buffer.capacity,
        )
        return TileSkipped(
            tile_index, SKIP_BUFFER_FULL,
            f"{block.sub_part_count} sub-parts do not fit",
        )

    transform = translation(position)
    for sub_part in range(block.sub_part_count):
        buffer.append(MergeEntry(block, sub_part, transform))
    return None


def assemble(
    root: ListToken,
    table: BlockTable,
    capacity: Optional[int] = None,
    policy: MergePolicy = STATIC_MERGE,
) -> Assembly:
    """Build the merged map mesh and collider from a validated level.

    Args:
        root: Validated level token tree.
        table: Block table the level was validated against.
        capacity: Merge buffer size. Defaults to the worst case,
            ``table.max_sub_parts * tile count``.
        policy: How staged entries are combined.

    Raises:
        AssemblyInvariantError: A tile is malformed or its identifier does
            not resolve, meaning the level was not validated against *table*.
    """
    tiles = root.items
    if capacity is None:
        capacity = table.max_sub_parts * len(tiles)
    logger.info("Number of tiles: %d", len(tiles))

    buffer = MergeBuffer(capacity)
    skipped: list[TileSkipped] = []

    if capacity > 0:
        for tile_index, tile in enumerate(tiles):
            record = read_tile(tile)
            object_index = table.resolve(record.local_id)
            if object_index is None:
                raise AssemblyInvariantError(
                    f"Tile {tile_index} identifier {record.local_id} does not resolve; "
                    "level was not validated against this block table"
                )
            skip = add_block(buffer, table, object_index, record.placement, tile_index)
            if skip is not None:
                skipped.append(skip)

    entries = buffer.compact()
    mesh = combine(entries, policy)
    logger.info(
        "Merged %d sub-parts into %d vertices, %d triangles (%d tiles skipped)",
        len(entries), mesh.vertex_count, mesh.triangle_count, len(skipped),
    )
    return Assembly(
        mesh=mesh,
        collider=MeshCollider(shared_mesh=mesh),
        skipped=skipped,
        entry_count=len(entries),
    )
