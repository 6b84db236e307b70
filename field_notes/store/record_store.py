"""
Record Store Module

NoteStore is the sole owner of durable note state and of the sync-state
transition rules. Every public method runs in its own short Session so each
mutation is atomic; the sync engine relies on this instead of cross-record
locking.
"""
import logging
from typing import Dict, Iterable, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, select

from field_notes.core.errors import DuplicateId, IdConflict, NoteNotFound
from field_notes.models.note import (
    Note, NoteFilter, NoteRecord, SyncAction, SyncStatus,
    encode_tags, parse_timestamp, utcnow_iso,
)
from field_notes.models.remote import RemoteNote

logger = logging.getLogger(__name__)

SYNCABLE_STATUSES = (SyncStatus.PENDING.value, SyncStatus.FAILED.value)


class NoteStore:
    """
    Local note table plus sync metadata.

    Public reads return Note views and skip tombstones. The raw accessors
    (get_raw, list_syncable) return NoteRecord rows for the sync engine.
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    def _session(self) -> Session:
        # Returned records stay readable after the session commits and closes
        return Session(self.engine, expire_on_commit=False)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_notes(self, note_filter: Optional[NoteFilter] = None) -> List[Note]:
        """
        Retrieve non-deleted notes, newest edit first.

        Args:
            note_filter: Optional text search (title, body or tag content) and
                exact tag constraint. The tag constraint is applied after the
                text search.

        Returns:
            List[Note]: Matching notes ordered by updated_at descending
        """
        statement = select(NoteRecord).where(NoteRecord.is_deleted == 0)

        if note_filter and note_filter.search_query:
            query = note_filter.search_query
            statement = statement.where(
                or_(
                    col(NoteRecord.title).contains(query, autoescape=True),
                    col(NoteRecord.body).contains(query, autoescape=True),
                    col(NoteRecord.tags).contains(query, autoescape=True),
                )
            )

        statement = statement.order_by(col(NoteRecord.updated_at).desc())

        with self._session() as session:
            records = session.exec(statement).all()

        notes = [Note.from_record(record) for record in records]

        # Tags are a JSON array column, exact matching is done on decoded lists
        if note_filter and note_filter.tag:
            notes = [note for note in notes if note_filter.tag in note.tags]

        return notes

    def get_note(self, note_id: str) -> Optional[Note]:
        record = self.get_raw(note_id)
        if record is None or record.is_deleted:
            return None
        return Note.from_record(record)

    def get_raw(self, note_id: str) -> Optional[NoteRecord]:
        """Row including sync metadata, tombstones included."""
        with self._session() as session:
            return session.get(NoteRecord, note_id)

    def list_syncable(self) -> List[NoteRecord]:
        """All rows whose sync status is pending or failed, tombstones included."""
        statement = select(NoteRecord).where(col(NoteRecord.sync_status).in_(SYNCABLE_STATUSES))
        with self._session() as session:
            return list(session.exec(statement).all())

    def count_by_status(self) -> Dict[str, int]:
        statement = (
            select(NoteRecord.sync_status, func.count(col(NoteRecord.id)))
            .group_by(NoteRecord.sync_status)
        )
        counts = {status.value: 0 for status in SyncStatus}
        with self._session() as session:
            for status, count in session.exec(statement).all():
                counts[status] = count
        return counts

    # ------------------------------------------------------------------
    # Local edits
    # ------------------------------------------------------------------

    def create_note(self, note: Note) -> Note:
        """
        Insert a note that has never reached the remote.

        Raises:
            DuplicateId: If a row with the same id exists (tombstones included)
        """
        record = NoteRecord(
            id=note.id,
            title=note.title,
            body=note.body,
            tags=encode_tags(note.tags),
            created_at=note.created_at,
            updated_at=note.updated_at,
            sync_status=SyncStatus.PENDING.value,
            sync_action=SyncAction.CREATE.value,
            is_deleted=0,
        )
        with self._session() as session:
            if session.get(NoteRecord, note.id) is not None:
                raise DuplicateId(note.id)
            session.add(record)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise DuplicateId(note.id) from exc
        return Note.from_record(record)

    def update_note(self, note: Note) -> Note:
        """
        Overwrite content of an existing note and mark it pending.

        A note that never reached the remote keeps its create action.

        Raises:
            NoteNotFound: If the note is absent or already deleted
        """
        with self._session() as session:
            record = session.get(NoteRecord, note.id)
            if record is None or record.is_deleted:
                raise NoteNotFound(note.id)

            record.title = note.title
            record.body = note.body
            record.tags = encode_tags(note.tags)
            record.updated_at = note.updated_at
            record.sync_status = SyncStatus.PENDING.value
            if record.sync_action != SyncAction.CREATE.value:
                record.sync_action = SyncAction.UPDATE.value

            session.add(record)
            session.commit()
        return Note.from_record(record)

    def delete_note(self, note_id: str) -> None:
        """
        Delete a note locally.

        Never-synced notes are removed outright. Anything the remote knows
        about becomes a tombstone until the remote confirms the delete.
        """
        with self._session() as session:
            record = session.get(NoteRecord, note_id)
            if record is None:
                return

            if record.sync_action == SyncAction.CREATE.value:
                session.delete(record)
            else:
                record.is_deleted = 1
                record.sync_status = SyncStatus.PENDING.value
                record.sync_action = SyncAction.DELETE.value
                record.updated_at = utcnow_iso()
                session.add(record)
            session.commit()

    # ------------------------------------------------------------------
    # Sync-state transitions (used by the sync engine)
    # ------------------------------------------------------------------

    def reconcile_id(self, old_id: str, new_id: str) -> None:
        """
        Atomically rename a note's primary key to the server-assigned id.

        Raises:
            NoteNotFound: If old_id does not exist
            IdConflict: If new_id is already taken
        """
        if old_id == new_id:
            return

        with self._session() as session:
            record = session.get(NoteRecord, old_id)
            if record is None:
                raise NoteNotFound(old_id)
            if session.get(NoteRecord, new_id) is not None:
                raise IdConflict(old_id, new_id)

            record.id = new_id
            session.add(record)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise IdConflict(old_id, new_id) from exc

        logger.debug("Note %s is now %s", old_id, new_id)

    def mark_synced(self, note_id: str) -> None:
        """Confirm a sync; a confirmed delete retires the tombstone."""
        with self._session() as session:
            record = session.get(NoteRecord, note_id)
            if record is None:
                logger.debug("mark_synced: note %s is gone", note_id)
                return

            if record.is_deleted or record.sync_action == SyncAction.DELETE.value:
                session.delete(record)
            else:
                record.sync_status = SyncStatus.SYNCED.value
                record.sync_action = SyncAction.NONE.value
                session.add(record)
            session.commit()

    def mark_failed(self, note_id: str) -> None:
        """Flag a failed sync. The pending action is kept for the retry."""
        self._update_sync_fields(note_id, status=SyncStatus.FAILED)

    def set_sync_state(self, note_id: str, status: SyncStatus, action: SyncAction) -> None:
        self._update_sync_fields(note_id, status=status, action=action)

    def requeue_update(self, note_id: str, remote_updated_at: str) -> None:
        """
        Leave a note pending as an update after the remote created its copy.

        The local updated_at becomes the later of itself and the remote's
        stamp, so the next update is not refused as older than the copy the
        remote already holds.
        """
        with self._session() as session:
            record = session.get(NoteRecord, note_id)
            if record is None:
                logger.debug("Update for note %s not queued, note is gone", note_id)
                return

            if parse_timestamp(remote_updated_at) > parse_timestamp(record.updated_at):
                record.updated_at = remote_updated_at
            record.sync_status = SyncStatus.PENDING.value
            record.sync_action = SyncAction.UPDATE.value
            session.add(record)
            session.commit()

    def _update_sync_fields(
        self,
        note_id: str,
        status: SyncStatus,
        action: Optional[SyncAction] = None,
    ) -> None:
        with self._session() as session:
            record = session.get(NoteRecord, note_id)
            if record is None:
                logger.debug("Sync state for note %s not written, note is gone", note_id)
                return

            record.sync_status = SyncStatus(status).value
            if action is not None:
                record.sync_action = SyncAction(action).value
            session.add(record)
            session.commit()

    def apply_remote(self, note_id: str, remote_note: RemoteNote) -> bool:
        """
        Overwrite local content with the remote copy and mark it synced.

        Used for remote-wins conflict resolution. A note deleted locally in
        the meantime keeps its pending delete.

        Returns:
            bool: True if the remote copy was written
        """
        with self._session() as session:
            record = session.get(NoteRecord, note_id)
            if record is None or record.is_deleted:
                logger.info("Remote copy of %s not applied, note was deleted locally", note_id)
                return False

            record.title = remote_note.title
            record.body = remote_note.body
            record.tags = encode_tags(remote_note.tags)
            record.updated_at = remote_note.updated_at
            record.sync_status = SyncStatus.SYNCED.value
            record.sync_action = SyncAction.NONE.value
            session.add(record)
            session.commit()
        return True

    def import_remote(self, remote_notes: Iterable[RemoteNote]) -> int:
        """
        Populate the store from a remote listing.

        Unknown notes are inserted as synced, synced notes are refreshed,
        and notes carrying local intent (pending, failed, tombstones) are
        left alone until they are pushed.

        Returns:
            int: Number of rows inserted or refreshed
        """
        written = 0
        with self._session() as session:
            for remote_note in remote_notes:
                record = session.get(NoteRecord, remote_note.id)
                if record is None:
                    record = NoteRecord(
                        id=remote_note.id,
                        created_at=remote_note.created_at,
                        title=remote_note.title,
                        sync_status=SyncStatus.SYNCED.value,
                        sync_action=SyncAction.NONE.value,
                        is_deleted=0,
                    )
                elif record.sync_status != SyncStatus.SYNCED.value or record.is_deleted:
                    continue

                record.title = remote_note.title
                record.body = remote_note.body
                record.tags = encode_tags(remote_note.tags)
                record.updated_at = remote_note.updated_at
                session.add(record)
                written += 1
            session.commit()
        return written
