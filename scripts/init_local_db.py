"""
Create the local notes table and report sync state counts.
"""
from field_notes.core.config import settings
from field_notes.db.session import create_db_engine, init_db
from field_notes.store.record_store import NoteStore


def init_local_db():
    print("--- Local Note Store ---")
    print(f"Database: {settings.DATABASE_URL}")

    engine = init_db(create_db_engine(settings.DATABASE_URL))
    store = NoteStore(engine)

    print("Table creation/verification successful.")
    for status, count in store.count_by_status().items():
        print(f"- {status}: {count}")


if __name__ == "__main__":
    init_local_db()
