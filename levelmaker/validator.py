"""levelmaker/validator.py — Level-array schema validation.

Walks the decoded token tree and confirms it is a list of tiles, each tile a
pair ``[identifier, position]``, each slot a pair of numbers, and that every
tile's identifier resolves in the block table. Stops at the first violation,
in tile order, then slot order, then leaf order.
"""

from __future__ import annotations

import logging
import math

from levelmaker.blocks import BlockTable
from levelmaker.codec import pack_pair
from levelmaker.errors import (
    NonNumericLeaf,
    SchemaViolation,
    UnknownIdentifier,
    WrongRootType,
    WrongSlotShape,
    WrongTileShape,
)
from levelmaker.tokens import ListToken, NumberToken, Token, token_type

logger = logging.getLogger(__name__)

TILE_SLOTS = 2  # identifier, position
SLOT_VALUES = 2  # x, y

ID_SLOT = 0
POSITION_SLOT = 1


def _check_slot(tile_index: int, slot: int, token: Token) -> None:
    if not isinstance(token, ListToken):
        raise WrongSlotShape(
            tile_index, slot, f"expected a list but got {token_type(token)}"
        )
    if len(token) != SLOT_VALUES:
        raise WrongSlotShape(
            tile_index, slot, f"expected {SLOT_VALUES} values, got {len(token)}"
        )
    for leaf, value in enumerate(token.items):
        if not isinstance(value, NumberToken):
            raise NonNumericLeaf(tile_index, slot, leaf, token_type(value))


def _check_tile(tile_index: int, token: Token, table: BlockTable) -> None:
    if not isinstance(token, ListToken):
        raise WrongTileShape(tile_index, f"expected a list but got {token_type(token)}")
    if len(token) != TILE_SLOTS:
        raise WrongTileShape(
            tile_index, f"expected {TILE_SLOTS} slots, got {len(token)}"
        )
    for slot, value in enumerate(token.items):
        _check_slot(tile_index, slot, value)

    id_x = token[ID_SLOT][0].value
    id_y = token[ID_SLOT][1].value
    local_id = pack_pair(id_x, id_y)
    if table.resolve(local_id) is None:
        raise UnknownIdentifier(tile_index, local_id, (math.floor(id_x), math.floor(id_y)))


def _walk(root: Token, table: BlockTable) -> None:
    if not isinstance(root, ListToken):
        raise WrongRootType(token_type(root))
    for tile_index, tile in enumerate(root.items):
        _check_tile(tile_index, tile, table)


def validate(root: Token, table: BlockTable) -> None:
    """Check *root* against the level schema.

    Raises:
        SchemaViolation: The first violation found. It is logged at its own
            level before being raised; non-numeric leaves and unknown
            identifiers log at INFO.
    """
    try:
        _walk(root, table)
    except SchemaViolation as e:
        logger.log(e.log_level, "%s", e)
        raise
    logger.debug("Validated %d tiles", len(root))
