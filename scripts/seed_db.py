"""
Seed script for the Civix Dispatch technician roster.

Usage:
  - Dry run (default): python scripts/seed_db.py
  - Apply to configured store: python scripts/seed_db.py --apply
  - Use another seed file: python scripts/seed_db.py --file path/to/seed.json --apply

Behavior:
  - Loads `db_seed.json` from the repo root.
  - Gets the store via `civix.services.store.get_dispatch_store()`, which is the
    in-memory store when USE_MOCK_DB=true and Firestore otherwise.
  - Writes each technician document (document id == technician id).

NOTE: Seeding the in-memory store only lasts for this process; the API seeds
its own in-memory roster from SEED_FILE at startup. For Firestore, set
`FIREBASE_CREDENTIALS_PATH` and `USE_MOCK_DB=false` in `.env` first.
"""

import argparse
import logging
import os
import sys

from civix.config.firebase import initialize_firestore
from civix.core.settings import settings
from civix.services.store import get_dispatch_store
from civix.utils.seed import load_seed, seed_store

logger = logging.getLogger("seed_db")


def main():
    logging.basicConfig(level=settings.LOG_LEVEL, format="%(levelname)s %(message)s")

    parser = argparse.ArgumentParser()
    parser.add_argument("--apply", action="store_true", help="Write seed to the store instead of dry-run")
    parser.add_argument("--file", default=os.path.join(os.getcwd(), "db_seed.json"), help="Seed file path")
    args = parser.parse_args()

    if not os.path.exists(args.file):
        logger.error(f"Seed file not found: {args.file}")
        return 1

    technicians = load_seed(args.file)

    if args.apply and not settings.USE_MOCK_DB:
        initialize_firestore()

    written = seed_store(get_dispatch_store(), technicians, apply=args.apply)

    if args.apply:
        logger.info(f"Seeding completed: {written} technician(s) written.")
    else:
        logger.info(f"Dry run complete ({len(technicians)} technician(s)). Re-run with --apply to write.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
