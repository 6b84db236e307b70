from typing import Optional

from field_notes.core.config import Settings, settings as default_settings
from field_notes.db.session import create_db_engine, init_db
from field_notes.remote.client import HttpRemoteClient
from field_notes.remote.connectivity import RemoteHealthProbe
from field_notes.store.record_store import NoteStore
from field_notes.sync.engine import SyncEngine


def create_sync_engine(config: Optional[Settings] = None) -> SyncEngine:
    """
    Wire a SyncEngine from settings: local SQLite store, HTTP remote client
    and a health-endpoint connectivity probe.
    """
    config = config or default_settings

    store = NoteStore(init_db(create_db_engine(config.DATABASE_URL)))
    remote = HttpRemoteClient(config.REMOTE_BASE_URL, timeout=config.REMOTE_TIMEOUT)
    probe = RemoteHealthProbe(
        config.REMOTE_BASE_URL,
        session=remote.session,
        timeout=config.CONNECTIVITY_TIMEOUT,
    )
    return SyncEngine(store=store, remote=remote, is_online=probe)
