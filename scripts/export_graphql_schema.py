#!/usr/bin/env python3
"""
Keep graphql_contract/schema.graphql in step with the clinic's GraphQL schema.

  python scripts/export_graphql_schema.py           # rewrite the snapshot
  python scripts/export_graphql_schema.py --check   # exit 1 if it is stale

The schema is taken from graphql_api in-process, so no server is needed.
Types and fields are written in lexicographic order so reordering type_defs
does not show up as a diff.

Optional env vars:
  SNAPSHOT_PATH=graphql_contract/schema.graphql
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from graphql_api import contract_changes, schema_sdl  # noqa: E402

DEFAULT_SNAPSHOT = ROOT / "graphql_contract" / "schema.graphql"


def snapshot_path() -> Path:
    return Path(os.getenv("SNAPSHOT_PATH", str(DEFAULT_SNAPSHOT)))


def export(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(schema_sdl(), encoding="utf-8")


def check(path: Path) -> list[str]:
    if not path.exists():
        return [f"snapshot {path} does not exist"]
    return contract_changes(path.read_text(encoding="utf-8"))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("--check", action="store_true", help="compare instead of writing")
    args = parser.parse_args(argv)

    path = snapshot_path()
    if not args.check:
        export(path)
        print(f"Wrote: {path}")
        return 0

    changes = check(path)
    for line in changes:
        print(line, file=sys.stderr)
    if changes:
        print(f"{path} is stale; rerun without --check and commit it", file=sys.stderr)
        return 1
    print(f"{path} matches the schema")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
