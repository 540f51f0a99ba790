"""levelmaker — Tile level loading and static map mesh merging."""

from levelmaker.assembler import (
    STATIC_MERGE,
    Assembly,
    CombinedMesh,
    MergeBuffer,
    MergeEntry,
    MergePolicy,
    MeshCollider,
    TileRecord,
    assemble,
    combine,
)
from levelmaker.blocks import BlockMesh, BlockTable, load_block_table, max_sub_parts
from levelmaker.codec import pack, resolve, unpack
from levelmaker.errors import (
    AssemblyInvariantError,
    ConfigMismatch,
    DecodeError,
    LoadError,
    NonNumericLeaf,
    SchemaViolation,
    TileSkipped,
    UnknownIdentifier,
    WrongRootType,
    WrongSlotShape,
    WrongTileShape,
)
from levelmaker.host import LevelHost, MeshFilter
from levelmaker.level import LevelBuild, load_level
from levelmaker.tokens import ListToken, NumberToken, OtherToken, decode
from levelmaker.validator import validate

__all__ = [
    "STATIC_MERGE",
    "Assembly",
    "CombinedMesh",
    "MergeBuffer",
    "MergeEntry",
    "MergePolicy",
    "MeshCollider",
    "TileRecord",
    "assemble",
    "combine",
    "BlockMesh",
    "BlockTable",
    "load_block_table",
    "max_sub_parts",
    "pack",
    "resolve",
    "unpack",
    "AssemblyInvariantError",
    "ConfigMismatch",
    "DecodeError",
    "LoadError",
    "NonNumericLeaf",
    "SchemaViolation",
    "TileSkipped",
    "UnknownIdentifier",
    "WrongRootType",
    "WrongSlotShape",
    "WrongTileShape",
    "LevelHost",
    "MeshFilter",
    "LevelBuild",
    "load_level",
    "ListToken",
    "NumberToken",
    "OtherToken",
    "decode",
    "validate",
]
