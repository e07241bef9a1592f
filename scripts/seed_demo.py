#!/usr/bin/env python3
"""
HireBoard - Demo Data CLI

Create the store tables and load demo jobs/applicants into an empty database.

Usage:
    python scripts/seed_demo.py            # seed if the store is empty
    python scripts/seed_demo.py --reset    # drop all tables first, then seed
"""
import sys
import os

# Add project root to path so we can import hireboard modules
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from hireboard.config import settings
from hireboard.database import Base, engine, get_resilient_session, init_db
from hireboard.seed import seed_demo_data


def seed(reset: bool = False):
    if settings.store.database_url.startswith("sqlite:///./"):
        os.makedirs("data", exist_ok=True)
    if reset:
        from hireboard import models  # noqa: F401
        Base.metadata.drop_all(bind=engine)
        print("Dropped all store tables.")
    init_db()

    with get_resilient_session() as db:
        seeded = seed_demo_data(db)

    if seeded:
        print("Seeded demo jobs and applicants.")
    else:
        print("Store already has jobs; nothing seeded. Use --reset to start over.")


if __name__ == "__main__":
    args = sys.argv[1:]
    if any(a not in ("--reset",) for a in args):
        print("Usage: python scripts/seed_demo.py [--reset]")
        sys.exit(1)

    seed(reset="--reset" in args)
