"""levelmaker/cli — Build a merged map mesh from the command line.

Usage::

    python -m levelmaker.cli level.json blocks.yaml
    python -m levelmaker.cli level.json blocks.yaml -o build/map.json
    LEVELMAKER_DEBUG=1 python -m levelmaker.cli level.json blocks.yaml
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict
from pathlib import Path

from levelmaker.blocks import load_block_table
from levelmaker.debug import configure_logging
from levelmaker.errors import LoadError
from levelmaker.level import LevelBuild, load_level


def format_summary(build: LevelBuild) -> str:
    """One-line summary of a finished build."""
    mesh = build.mesh
    return (
        f"{build.tile_count} tiles  "
        f"{len(mesh.sub_parts)} sub-parts  "
        f"{mesh.vertex_count} vertices  "
        f"{mesh.triangle_count} triangles  "
        f"{len(build.skipped)} skipped"
    )


def build_to_dict(build: LevelBuild) -> dict:
    """JSON-serializable form of the merged mesh and skip report."""
    return {
        "tile_count": build.tile_count,
        "vertices": build.mesh.vertices.tolist(),
        "sub_parts": [p.tolist() for p in build.mesh.sub_parts],
        "skipped": [asdict(s) for s in build.skipped],
    }


def save_build(build: LevelBuild, path: Path | str) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(build_to_dict(build), indent=2) + "\n")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Merge a tile level into one map mesh")
    parser.add_argument("level", help="Level JSON file")
    parser.add_argument("blocks", help="Block manifest YAML file")
    parser.add_argument(
        "--output", "-o", help="Write the merged mesh as JSON to this path",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Log every placed block",
    )
    args = parser.parse_args(argv)

    configure_logging(args.verbose)

    table = load_block_table(args.blocks)
    text = Path(args.level).read_text()

    try:
        build = load_level(text, table)
    except LoadError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(format_summary(build))

    if args.output:
        save_build(build, args.output)


if __name__ == "__main__":
    main()
