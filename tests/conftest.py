"""Shared pytest fixtures."""
from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, List, Optional, Set

import pytest
from fastapi.testclient import TestClient

from field_notes.core.errors import RemoteNotFound, RemoteUnavailable
from field_notes.db.session import create_db_engine, init_db
from field_notes.main import create_app
from field_notes.models.note import utcnow_iso
from field_notes.models.remote import NotePayload, NoteUpdatePayload, RemoteNote
from field_notes.remote.client import RemoteClient
from field_notes.remote.connectivity import StaticConnectivity
from field_notes.store.record_store import NoteStore
from field_notes.sync.engine import SyncEngine


def ts(second: int) -> str:
    """Fixed, ordered ISO timestamps for tests."""
    return f"2024-01-01T00:00:{second:02d}+00:00"


class FakeRemote(RemoteClient):
    """
    In-memory remote notes service.

    Knobs:
        fail_titles: create/update of a payload with this title raises RemoteUnavailable
        fail_ids: update/delete of this id raises RemoteUnavailable
        conflicts: update of this id returns the given note (409)
        next_ids: server ids to hand out before falling back to srv-N
        on_call: hook(operation, key) run while the call is "in flight"
    """

    def __init__(self) -> None:
        self.notes: Dict[str, RemoteNote] = {}
        self.calls: List[tuple] = []
        self.fail_titles: Set[str] = set()
        self.fail_ids: Set[str] = set()
        self.conflicts: Dict[str, RemoteNote] = {}
        self.next_ids: List[str] = []
        self.on_call: Optional[Callable[[str, str], None]] = None
        self._counter = 0

    def _in_flight(self, operation: str, key: str) -> None:
        self.calls.append((operation, key))
        if self.on_call is not None:
            self.on_call(operation, key)

    def put(self, note_id: str, title: str, updated_at: str = None, **fields) -> RemoteNote:
        """Seed a note directly on the remote."""
        stamp = updated_at or ts(0)
        note = RemoteNote(
            id=note_id,
            title=title,
            body=fields.get("body", ""),
            tags=fields.get("tags", []),
            created_at=fields.get("created_at", stamp),
            updated_at=stamp,
        )
        self.notes[note_id] = note
        return note

    def fetch_all(self) -> List[RemoteNote]:
        self.calls.append(("fetch_all", ""))
        return list(self.notes.values())

    def create(self, payload: NotePayload) -> RemoteNote:
        self._in_flight("create", payload.title)
        if payload.title in self.fail_titles:
            raise RemoteUnavailable("connection reset")

        if self.next_ids:
            note_id = self.next_ids.pop(0)
        else:
            self._counter += 1
            note_id = f"srv-{self._counter}"
        now = utcnow_iso()
        note = RemoteNote(
            id=note_id,
            title=payload.title,
            body=payload.body,
            tags=payload.tags,
            created_at=now,
            updated_at=now,
        )
        self.notes[note_id] = note
        return note

    def update(self, note_id: str, payload: NoteUpdatePayload) -> Optional[RemoteNote]:
        self._in_flight("update", note_id)
        if note_id in self.fail_ids or payload.title in self.fail_titles:
            raise RemoteUnavailable("timeout", status_code=None)
        if note_id in self.conflicts:
            return self.conflicts[note_id]
        if note_id not in self.notes:
            raise RemoteNotFound("not found", status_code=404)

        self.notes[note_id] = self.notes[note_id].model_copy(update={
            "title": payload.title,
            "body": payload.body,
            "tags": payload.tags,
            "updated_at": payload.updated_at,
        })
        return None

    def delete(self, note_id: str) -> None:
        self._in_flight("delete", note_id)
        if note_id in self.fail_ids:
            raise RemoteUnavailable("bad gateway", status_code=502)
        if note_id not in self.notes:
            raise RemoteNotFound("not found", status_code=404)
        del self.notes[note_id]

    def operations(self) -> List[str]:
        return [operation for operation, _ in self.calls]


@pytest.fixture
def db_engine(tmp_path: Path):
    return init_db(create_db_engine(f"sqlite:///{tmp_path / 'notes.db'}"))


@pytest.fixture
def store(db_engine) -> NoteStore:
    return NoteStore(db_engine)


@pytest.fixture
def remote() -> FakeRemote:
    return FakeRemote()


@pytest.fixture
def connectivity() -> StaticConnectivity:
    return StaticConnectivity(True)


@pytest.fixture
def sync_engine(store: NoteStore, remote: FakeRemote, connectivity: StaticConnectivity) -> SyncEngine:
    return SyncEngine(store=store, remote=remote, is_online=connectivity)


@pytest.fixture
def remote_app(tmp_path: Path):
    return create_app(create_db_engine(f"sqlite:///{tmp_path / 'remote.db'}"))


@pytest.fixture
def api_client(remote_app):
    with TestClient(remote_app) as client:
        yield client


@pytest.fixture
def base_url() -> str:
    return "http://testserver/api/v1"
