#!/usr/bin/env python3
"""
Import board games into the catalog from BoardGameGeek by name.

Names come from a text file (one per line, # comments allowed) or the command line.
Each name is resolved with an exact BGG search; games already in the catalog are skipped.
Requests are spaced out to stay under BGG's rate limit.

Run: cd backend && python scripts/import_games.py games.txt
     cd backend && python scripts/import_games.py --name "Azul" --name "Cascadia"
"""
import argparse
import logging
import sys
from pathlib import Path

backend_dir = Path(__file__).resolve().parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

from gamecafe.db.session import SessionLocal
from gamecafe.services.bgg import BggClient
from gamecafe.services.catalog_service import import_games_by_name


def _read_names(path: Path) -> list[str]:
    names = []
    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if line and not line.startswith("#"):
            names.append(line)
    return names


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    parser = argparse.ArgumentParser(description="Import games from BoardGameGeek by name.")
    parser.add_argument("file", nargs="?", type=Path, help="Text file with one game name per line")
    parser.add_argument("--name", action="append", default=[], help="Game name (repeatable)")
    args = parser.parse_args()

    names = list(args.name)
    if args.file:
        names.extend(_read_names(args.file))
    if not names:
        parser.error("give a file or at least one --name")

    db = SessionLocal()
    try:
        report = import_games_by_name(db, BggClient(), names)
    except Exception as e:
        db.rollback()
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        db.close()

    print(f"Imported: {len(report['imported'])}")
    print(f"Already in catalog: {len(report['existing'])}")
    if report["not_found"]:
        print(f"Not found on BGG ({len(report['not_found'])}): {', '.join(report['not_found'])}")
    if report["failed"]:
        print(f"Failed ({len(report['failed'])}): {', '.join(report['failed'])}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
