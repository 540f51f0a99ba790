"""Tests for levelmaker/blocks.py — block geometry, table, YAML manifest."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
import yaml

from levelmaker.blocks import (
    BlockMesh,
    BlockTable,
    load_block_table,
    max_sub_parts,
    parse_block_table,
)
from levelmaker.codec import pack
from levelmaker.errors import ConfigMismatch, LoadError

QUAD_VERTS = [[0, 0, 0], [1, 0, 0], [1, 1, 0], [0, 1, 0]]
QUAD_TRIS = [[0, 1, 2], [0, 2, 3]]


def _block(name: str = "quad", parts: int = 1) -> BlockMesh:
    return BlockMesh(name=name, vertices=QUAD_VERTS, sub_parts=[QUAD_TRIS] * parts)


def _write_yaml(tmp_path: Path, data: dict) -> Path:
    p = tmp_path / "blocks.yaml"
    p.write_text(yaml.dump(data))
    return p


# ---------------------------------------------------------------------------
# BlockMesh
# ---------------------------------------------------------------------------

class TestBlockMesh:
    def test_coerces_arrays(self):
        b = _block()
        assert b.vertices.shape == (4, 3)
        assert b.vertices.dtype == np.float64
        assert b.sub_parts[0].shape == (2, 3)
        assert b.sub_parts[0].dtype == np.int64

    def test_flat_triangle_list_reshaped(self):
        b = BlockMesh("flat", QUAD_VERTS, [[0, 1, 2, 0, 2, 3]])
        assert b.sub_parts[0].shape == (2, 3)

    def test_sub_part_count(self):
        assert _block(parts=3).sub_part_count == 3
        assert BlockMesh("empty", QUAD_VERTS).sub_part_count == 0

    def test_rejects_out_of_range_vertex(self):
        with pytest.raises(ValueError, match="outside"):
            BlockMesh("bad", QUAD_VERTS, [[[0, 1, 4]]])

    def test_rejects_negative_vertex(self):
        with pytest.raises(ValueError):
            BlockMesh("bad", QUAD_VERTS, [[[0, -1, 2]]])


class TestMaxSubParts:
    def test_none_and_empty(self):
        assert max_sub_parts(None) == 0
        assert max_sub_parts([]) == 0

    def test_largest_wins(self):
        assert max_sub_parts([_block(parts=1), _block(parts=4), _block(parts=2)]) == 4


# ---------------------------------------------------------------------------
# BlockTable
# ---------------------------------------------------------------------------

class TestBlockTable:
    def test_check_passes_on_equal_lengths(self):
        BlockTable([pack(1, 0)], [_block()]).check()

    def test_check_raises_on_mismatch(self):
        table = BlockTable([pack(1, 0), pack(2, 0)], [_block()])
        with pytest.raises(ConfigMismatch) as exc:
            table.check()
        assert exc.value.id_count == 2
        assert exc.value.block_count == 1
        assert isinstance(exc.value, LoadError)

    def test_identifiers_normalized_to_int32(self):
        table = BlockTable([0x80000000, np.int64(5)], [_block(), _block()])
        assert table.identifiers == [-(2**31), 5]
        assert table.resolve(pack(0, 0x8000)) == 0

    def test_resolve(self):
        table = BlockTable([pack(1, 0), pack(0, 1)], [_block("a"), _block("b")])
        assert table.resolve(pack(0, 1)) == 1
        assert table.resolve(pack(9, 9)) is None

    def test_max_sub_parts_property(self):
        table = BlockTable([1, 2], [_block(parts=2), _block(parts=5)])
        assert table.max_sub_parts == 5


# ---------------------------------------------------------------------------
# YAML manifest
# ---------------------------------------------------------------------------

class TestManifest:
    def test_load_pair_and_packed_ids(self, tmp_path):
        path = _write_yaml(tmp_path, {"blocks": [
            {"id": [3, 1], "name": "grass", "vertices": QUAD_VERTS, "sub_parts": [QUAD_TRIS]},
            {"id": 7, "vertices": QUAD_VERTS, "sub_parts": [QUAD_TRIS, QUAD_TRIS]},
        ]})
        table = load_block_table(path)
        assert table.identifiers == [pack(3, 1), 7]
        assert table.blocks[0].name == "grass"
        assert table.blocks[1].name == "block_1"
        assert table.blocks[1].sub_part_count == 2
        table.check()

    def test_accepts_string_path(self, tmp_path):
        path = _write_yaml(tmp_path, {"blocks": []})
        table = load_block_table(str(path))
        assert table.identifiers == []
        assert table.blocks == []

    def test_missing_key(self):
        with pytest.raises(ValueError, match="sub_parts"):
            parse_block_table({"blocks": [{"id": 1, "vertices": QUAD_VERTS}]})

    def test_bad_id_pair(self):
        with pytest.raises(ValueError, match="pair"):
            parse_block_table({"blocks": [
                {"id": [1, 2, 3], "vertices": QUAD_VERTS, "sub_parts": [QUAD_TRIS]},
            ]})

    def test_boolean_id_rejected(self):
        with pytest.raises(ValueError, match="Unsupported"):
            parse_block_table({"blocks": [
                {"id": True, "vertices": QUAD_VERTS, "sub_parts": [QUAD_TRIS]},
            ]})

    @pytest.mark.parametrize("data", [None, [], {"blocks": "nope"}, {"other": []}])
    def test_bad_manifest_shape(self, data):
        with pytest.raises(ValueError, match="mapping"):
            parse_block_table(data)

    def test_non_mapping_block(self):
        with pytest.raises(ValueError, match="Block #0"):
            parse_block_table({"blocks": [[1, 2]]})
