"""levelmaker/blocks.py — Building-block geometry and the block table.

A building block is a small indexed triangle mesh split into sub-parts (one
per material region). The block table pairs each block with the packed
identifier levels use to reference it. Tables come from the host as two
parallel sequences, or from a YAML manifest via ``load_block_table``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence

import numpy as np
import yaml

from levelmaker.codec import pack, resolve, to_int32
from levelmaker.errors import ConfigMismatch


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------

@dataclass
class BlockMesh:
    """Reusable block geometry: shared vertices, triangles grouped by sub-part."""

    name: str
    vertices: np.ndarray  # (N, 3) float64
    sub_parts: list[np.ndarray] = field(default_factory=list)  # each (K, 3) int64

    def __post_init__(self) -> None:
        self.vertices = np.asarray(self.vertices, dtype=np.float64).reshape(-1, 3)
        parts = []
        for i, part in enumerate(self.sub_parts):
            tris = np.asarray(part, dtype=np.int64).reshape(-1, 3)
            if tris.size and (tris.min() < 0 or tris.max() >= len(self.vertices)):
                raise ValueError(
                    f"Block {self.name!r} sub-part {i} references a vertex "
                    f"outside 0..{len(self.vertices) - 1}"
                )
            parts.append(tris)
        self.sub_parts = parts

    @property
    def sub_part_count(self) -> int:
        return len(self.sub_parts)


def max_sub_parts(blocks: Optional[Sequence[BlockMesh]]) -> int:
    """Largest sub-part count among *blocks* (0 for none)."""
    if not blocks:
        return 0
    return max(b.sub_part_count for b in blocks)


# ---------------------------------------------------------------------------
# Block table
# ---------------------------------------------------------------------------

@dataclass
class BlockTable:
    """Parallel identifier / block sequences supplied by the host.

    A length mismatch is not rejected here; ``check`` reports it so loads can
    fail before touching any level data.
    """

    identifiers: list[int]
    blocks: list[BlockMesh]

    def __post_init__(self) -> None:
        self.identifiers = [to_int32(int(i)) for i in self.identifiers]
        self.blocks = list(self.blocks)

    def check(self) -> None:
        """Raise ConfigMismatch unless both sequences have the same length."""
        if len(self.identifiers) != len(self.blocks):
            raise ConfigMismatch(len(self.identifiers), len(self.blocks))

    def resolve(self, key: int) -> Optional[int]:
        return resolve(key, self.identifiers)

    @property
    def max_sub_parts(self) -> int:
        return max_sub_parts(self.blocks)


# ---------------------------------------------------------------------------
# YAML manifest
# ---------------------------------------------------------------------------

def _parse_identifier(raw) -> int:
    """Accept either an ``[x, y]`` pair or an already packed integer."""
    if isinstance(raw, (list, tuple)):
        if len(raw) != 2:
            raise ValueError(f"Block id pair must have 2 values, got {raw!r}")
        return pack(int(raw[0]), int(raw[1]))
    if isinstance(raw, int) and not isinstance(raw, bool):
        return to_int32(raw)
    raise ValueError(f"Unsupported block id: {raw!r}")


def _parse_block(data: dict, index: int) -> tuple[int, BlockMesh]:
    if not isinstance(data, dict):
        raise ValueError(f"Block #{index} must be a mapping, got {type(data).__name__}")
    for key in ("id", "vertices", "sub_parts"):
        if key not in data:
            raise ValueError(f"Block #{index} is missing required key {key!r}")
    block = BlockMesh(
        name=data.get("name", f"block_{index}"),
        vertices=data["vertices"],
        sub_parts=data["sub_parts"],
    )
    return _parse_identifier(data["id"]), block


def parse_block_table(data: dict) -> BlockTable:
    """Build a BlockTable from a manifest dict (``{"blocks": [...]}``)."""
    if not isinstance(data, dict) or not isinstance(data.get("blocks"), list):
        raise ValueError("Block manifest must be a mapping with a 'blocks' list")
    identifiers = []
    blocks = []
    for i, raw in enumerate(data["blocks"]):
        ident, block = _parse_block(raw, i)
        identifiers.append(ident)
        blocks.append(block)
    return BlockTable(identifiers=identifiers, blocks=blocks)


def load_block_table(path: Path | str) -> BlockTable:
    """Load a block table from a YAML manifest file."""
    with open(path) as f:
        data = yaml.safe_load(f)
    return parse_block_table(data)
