"""
Sync Engine Module

Drives one reconciliation pass between locally pending notes and the remote
notes service.

Each syncable record is pushed on its own: tombstones first, then creates,
then updates. Remote failures are contained per record and turned into a
failed sync status; they never abort the rest of the pass. Local store
errors are contained the same way, except a server id that collides with
an existing note, which ends the pass. Local edits may land while a remote
call is in flight, so every outcome is written back only after re-reading
the record's updated_at.
"""
import logging
import threading
from enum import Enum
from typing import Callable, List

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from field_notes.core.errors import (
    IdConflict, NoteNotFound, NoteStoreError, RemoteError, RemoteNotFound,
)
from field_notes.models.note import NoteRecord, SyncAction, SyncStatus, decode_tags
from field_notes.models.remote import NotePayload, NoteUpdatePayload
from field_notes.remote.client import RemoteClient
from field_notes.store.record_store import NoteStore

logger = logging.getLogger(__name__)


class SyncOutcome(str, Enum):
    SUCCESS = "success"
    PARTIAL = "partial"
    OFFLINE = "offline"
    NO_DATA = "no-data"


class SyncResult(BaseModel):
    """Coarse outcome of a sync pass plus per-pass counts."""
    status: SyncOutcome
    processed: int = 0
    failed: int = 0


class _Tally:
    """Running counts, kept outside the pass so an aborted pass can still report them."""

    def __init__(self):
        self.processed = 0
        self.failed = 0

    def result(self) -> SyncResult:
        if self.processed == 0 and self.failed == 0:
            status = SyncOutcome.NO_DATA
        elif self.failed > 0:
            status = SyncOutcome.PARTIAL
        else:
            status = SyncOutcome.SUCCESS
        return SyncResult(status=status, processed=self.processed, failed=self.failed)


def _is_delete(record: NoteRecord) -> bool:
    return bool(record.is_deleted) or record.sync_action == SyncAction.DELETE.value


def _priority(record: NoteRecord) -> int:
    if _is_delete(record):
        return 0
    if record.sync_action == SyncAction.CREATE.value:
        return 1
    return 2


class SyncEngine:
    """
    Pushes pending local notes to the remote.

    Args:
        store: Local note store
        remote: Remote notes client; nothing else in the package calls it
        is_online: Connectivity probe, consulted once per sync() call
    """

    def __init__(self, store: NoteStore, remote: RemoteClient, is_online: Callable[[], bool]):
        self.store = store
        self.remote = remote
        self.is_online = is_online
        # Non-reentrant guard: a second caller is turned away, never queued
        self._in_flight = threading.Lock()

    @property
    def in_flight(self) -> bool:
        return self._in_flight.locked()

    def sync(self) -> SyncResult:
        """
        Run one sync pass.

        Returns:
            SyncResult: no-data if a pass is already running or nothing was
            pending, offline if the probe says so, otherwise success or
            partial with processed/failed counts.
        """
        if not self._in_flight.acquire(blocking=False):
            logger.info("Sync already in flight, not starting another pass")
            return SyncResult(status=SyncOutcome.NO_DATA)

        try:
            if not self.is_online():
                logger.info("Offline, sync skipped")
                return SyncResult(status=SyncOutcome.OFFLINE)

            tally = _Tally()
            try:
                self._push_changes(tally)
            except Exception:
                logger.exception(
                    "Sync pass aborted after %d processed, %d failed",
                    tally.processed, tally.failed,
                )
                return SyncResult(
                    status=SyncOutcome.PARTIAL,
                    processed=tally.processed,
                    failed=tally.failed,
                )

            result = tally.result()
            logger.info(
                "Sync finished: %s (%d processed, %d failed)",
                result.status.value, result.processed, result.failed,
            )
            return result
        finally:
            self._in_flight.release()

    def populate(self) -> int:
        """
        Fill the local store from the remote's full listing.

        Shares the in-flight guard with sync(). Remote errors propagate to
        the caller.

        Returns:
            int: Rows inserted or refreshed; 0 when offline or busy
        """
        if not self._in_flight.acquire(blocking=False):
            logger.info("Sync in flight, populate skipped")
            return 0

        try:
            if not self.is_online():
                logger.info("Offline, populate skipped")
                return 0
            written = self.store.import_remote(self.remote.fetch_all())
            logger.info("Imported %d notes from remote", written)
            return written
        finally:
            self._in_flight.release()

    def _push_changes(self, tally: _Tally) -> None:
        records: List[NoteRecord] = sorted(self.store.list_syncable(), key=_priority)
        if records:
            logger.info("Syncing %d notes", len(records))

        for record in records:
            if self._sync_record(record):
                tally.processed += 1
            else:
                tally.failed += 1

    def _sync_record(self, record: NoteRecord) -> bool:
        try:
            if _is_delete(record):
                return self._handle_delete(record)
            if record.sync_action == SyncAction.CREATE.value:
                return self._handle_create(record)
            return self._handle_update(record)
        except IdConflict:
            raise
        except (NoteStoreError, SQLAlchemyError, ValueError):
            logger.exception("Sync of note %s failed locally", record.id)
            self._mark_failed_after_error(record.id)
            return False

    def _mark_failed_after_error(self, note_id: str) -> None:
        try:
            self.store.mark_failed(note_id)
        except SQLAlchemyError as exc:
            logger.error("Could not flag note %s as failed: %s", note_id, exc)

    def _handle_delete(self, record: NoteRecord) -> bool:
        try:
            self.remote.delete(record.id)
        except RemoteNotFound:
            logger.debug("Note %s already deleted remotely", record.id)
        except RemoteError as exc:
            logger.warning("Delete of note %s failed: %s", record.id, exc)
            self.store.mark_failed(record.id)
            return False

        self.store.mark_synced(record.id)
        return True

    def _handle_create(self, record: NoteRecord) -> bool:
        payload = NotePayload(
            title=record.title,
            body=record.body,
            tags=decode_tags(record.tags),
        )
        try:
            server_note = self.remote.create(payload)
        except RemoteError as exc:
            logger.warning("Create of note %s failed: %s", record.id, exc)
            self.store.mark_failed(record.id)
            return False

        # The remote now has the note whatever happens locally, so the
        # server id is adopted first.
        try:
            self.store.reconcile_id(record.id, server_note.id)
        except NoteNotFound:
            self._discard_orphan(record.id, server_note.id)
            return True

        fresh = self.store.get_raw(server_note.id)
        if fresh is None:
            self._discard_orphan(record.id, server_note.id)
        elif fresh.updated_at == record.updated_at:
            self.store.mark_synced(server_note.id)
        else:
            # Edited during the round trip: next pass pushes the edit as an update
            logger.info("Note %s changed while being created, left pending", server_note.id)
            self.store.requeue_update(server_note.id, server_note.updated_at)
        return True

    def _discard_orphan(self, local_id: str, server_id: str) -> None:
        logger.info("Note %s was deleted while being created, removing remote copy %s", local_id, server_id)
        try:
            self.remote.delete(server_id)
        except RemoteError as exc:
            logger.warning("Remote copy %s left behind: %s", server_id, exc)

    def _handle_update(self, record: NoteRecord) -> bool:
        payload = NoteUpdatePayload(
            title=record.title,
            body=record.body,
            tags=decode_tags(record.tags),
            updated_at=record.updated_at,
        )
        try:
            conflict = self.remote.update(record.id, payload)
        except RemoteNotFound:
            return self._handle_missing_remote(record)
        except RemoteError as exc:
            logger.warning("Update of note %s failed: %s", record.id, exc)
            self.store.mark_failed(record.id)
            return False

        if conflict is not None:
            logger.info("Note %s conflicts with a newer remote copy, remote wins", record.id)
            self.store.apply_remote(record.id, conflict)
            return True

        fresh = self.store.get_raw(record.id)
        if fresh is None or fresh.updated_at != record.updated_at:
            logger.debug("Note %s changed during update, left pending", record.id)
            return True

        self.store.mark_synced(record.id)
        return True

    def _handle_missing_remote(self, record: NoteRecord) -> bool:
        """
        The remote lost the note (deleted server-side).

        Local content wins: the note goes back to a create so the next pass
        re-creates it. A note deleted locally meanwhile is simply retired.
        """
        fresh = self.store.get_raw(record.id)
        if fresh is not None and fresh.is_deleted:
            self.store.mark_synced(record.id)
            return True

        logger.warning("Note %s no longer exists remotely, will re-create it", record.id)
        self.store.set_sync_state(record.id, SyncStatus.FAILED, SyncAction.CREATE)
        return False
