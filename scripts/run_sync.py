"""
Run one sync pass against the configured remote and print the outcome.

Pass --populate to pull the remote's notes into the local store first.
"""
import sys

from field_notes.core.config import settings
from field_notes.core.logging import setup_logging
from field_notes.sync.factory import create_sync_engine


def run_sync(populate: bool = False):
    setup_logging(settings.LOG_LEVEL)
    print(f"--- Sync against {settings.REMOTE_BASE_URL} ---")

    engine = create_sync_engine(settings)

    if populate:
        imported = engine.populate()
        print(f"Imported {imported} notes from remote")

    result = engine.sync()
    print(f"Status: {result.status.value}")
    print(f"Processed: {result.processed}")
    print(f"Failed: {result.failed}")

    print("\nLocal sync state:")
    for status, count in engine.store.count_by_status().items():
        print(f"- {status}: {count}")


if __name__ == "__main__":
    run_sync(populate="--populate" in sys.argv[1:])
