"""Apply the store's schema and topic seed without starting the server.

Usage: python init_db.py [--reset | --keep]

`--reset` drops users, topics and assignments before recreating them;
`--keep` only creates missing tables and restores the topic catalog. The
default follows `JUSLEARN_RESET_ON_STARTUP`.
"""
import argparse
from juslearn.config import settings
from juslearn.database import Store


def run(reset: bool):
    """Initialise the configured database and print a short summary."""
    print("Using database:", settings.DATABASE_URL)
    store = Store(settings.DATABASE_URL, enforce_foreign_keys=settings.ENFORCE_FOREIGN_KEYS)
    try:
        store.initialize(reset=reset)
    finally:
        store.dispose()
    print("Schema ready (reset=%s)." % reset)


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--reset', dest='reset', action='store_true', default=None)
    group.add_argument('--keep', dest='reset', action='store_false')
    args = parser.parse_args()
    run(settings.RESET_ON_STARTUP if args.reset is None else args.reset)
