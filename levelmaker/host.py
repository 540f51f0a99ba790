"""levelmaker/host.py — Lifecycle glue between a host application and the loader.

The host owns a render slot and a collision slot. ``on_enable`` checks the
block table configuration, ``start`` loads the level and fills both slots.
Fatal load errors are logged and leave whatever the slots held untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from levelmaker.assembler import CombinedMesh, MeshCollider
from levelmaker.blocks import BlockTable
from levelmaker.errors import ConfigMismatch, LoadError
from levelmaker.level import LevelBuild, load_level

logger = logging.getLogger(__name__)


@dataclass
class MeshFilter:
    """Render slot."""

    shared_mesh: Optional[CombinedMesh] = None


@dataclass
class LevelHost:
    json_data: str
    table: BlockTable
    render_slot: MeshFilter = field(default_factory=MeshFilter)
    collider: MeshCollider = field(default_factory=MeshCollider)

    def on_enable(self) -> bool:
        """Report a mismatched block table as soon as the host is enabled."""
        try:
            self.table.check()
        except ConfigMismatch as e:
            logger.error("%s", e)
            return False
        return True

    def start(self) -> Optional[LevelBuild]:
        """Load the level and hand the merged mesh to both slots.

        Returns:
            The LevelBuild, or None if the load failed.
        """
        try:
            build = load_level(self.json_data, self.table)
        except LoadError as e:
            logger.error("Level load failed: %s", e)
            return None
        self.render_slot.shared_mesh = build.mesh
        self.collider.shared_mesh = build.mesh
        return build
