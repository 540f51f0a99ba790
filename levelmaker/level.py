"""levelmaker/level.py — Level load pipeline: decode, validate, assemble.

``load_level`` is the single entry point. It runs synchronously and either
returns the merged map or raises a ``LoadError``; nothing is handed to the
host unless the whole pipeline succeeds.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator, Optional

from levelmaker.assembler import (
    STATIC_MERGE,
    CombinedMesh,
    MeshCollider,
    MergePolicy,
    assemble,
)
from levelmaker.blocks import BlockTable
from levelmaker.errors import SchemaViolation, TileSkipped
from levelmaker.tokens import decode
from levelmaker.validator import validate

logger = logging.getLogger(__name__)


@dataclass
class LevelBuild:
    """Result of a successful load. Unpacks as ``mesh, collider``."""

    mesh: CombinedMesh
    collider: MeshCollider
    tile_count: int
    skipped: list[TileSkipped] = field(default_factory=list)

    def __iter__(self) -> Iterator:
        return iter((self.mesh, self.collider))


def load_level(
    json_text: str,
    table: BlockTable,
    *,
    capacity: Optional[int] = None,
    policy: MergePolicy = STATIC_MERGE,
) -> LevelBuild:
    """Load a level from JSON text against *table*.

    Args:
        json_text: Level array ``[[[idX, idY], [x, y]], ...]``.
        table: Block identifiers and geometry.
        capacity: Optional merge buffer size override.
        policy: Mesh combine policy.

    Raises:
        ConfigMismatch: The table's identifiers and blocks differ in length.
        DecodeError: The text is not well-formed JSON.
        SchemaViolation: The level does not match the schema or references
            an unknown block.
    """
    table.check()

    root = decode(json_text)

    try:
        validate(root, table)
    except SchemaViolation:
        logger.error("The provided JSON data had invalid fields")
        raise

    assembly = assemble(root, table, capacity=capacity, policy=policy)
    return LevelBuild(
        mesh=assembly.mesh,
        collider=assembly.collider,
        tile_count=len(root),
        skipped=assembly.skipped,
    )
