#!/usr/bin/env python3
"""
Run the Party Finder inactivity cleanup once, outside the API process.

Sets active users who have not logged in within party_finder_inactive_days to resting.
The API's own directory cache is per process, so entries there expire on their TTL.

Run: cd backend && python scripts/cleanup_inactive_users.py
"""
import logging
import sys
from pathlib import Path

backend_dir = Path(__file__).resolve().parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

from gamecafe.db.session import SessionLocal
from gamecafe.services.party_finder.activity import cleanup_inactive_users
from gamecafe.services.party_finder.cache import TTLCache


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    db = SessionLocal()
    try:
        result = cleanup_inactive_users(db, TTLCache())
    finally:
        db.close()
    print(f"Users set to resting: {result.updated}")
    for err in result.errors:
        print(f"  {err}", file=sys.stderr)
    if result.errors:
        sys.exit(1)


if __name__ == "__main__":
    main()
