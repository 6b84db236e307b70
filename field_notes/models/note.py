"""
Note Model Module

This module defines the persisted NoteRecord table (note content plus sync
metadata) and the public Note view handed to callers. Sync metadata other
than the status is hidden from the public view; the sync engine works on
raw records.
"""
import json
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel
from sqlmodel import SQLModel, Field


def utcnow_iso() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO-8601 timestamp into an aware datetime.

    A trailing "Z" is accepted and naive values are taken as UTC.
    """
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def encode_tags(tags: List[str]) -> str:
    """Serialize tags to the JSON array string stored in the tags column."""
    return json.dumps(list(tags), ensure_ascii=False)


def decode_tags(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    return list(json.loads(raw))


class SyncStatus(str, Enum):
    SYNCED = "synced"
    PENDING = "pending"
    FAILED = "failed"


class SyncAction(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    NONE = "none"


class NoteBase(SQLModel):
    """
    Base properties shared by the stored record and the public view.
    """
    # Basic note content
    title: str = Field(nullable=False)
    body: str = Field(default="", nullable=False)

    # Audit timestamps, ISO-8601 strings; updated_at never precedes created_at
    created_at: str = Field(default_factory=utcnow_iso, nullable=False)
    updated_at: str = Field(default_factory=utcnow_iso, nullable=False)


class NoteRecord(NoteBase, table=True):
    """
    Note table model, one row per note including tombstones.
    """
    __tablename__ = "notes"

    # Client UUID until the remote accepts the note, then the server id
    id: str = Field(primary_key=True)

    # Tags stored as JSON string array, order preserved
    tags: str = Field(default="[]", nullable=False)  # e.g., '["work", "field"]'

    # Sync metadata
    sync_status: str = Field(default=SyncStatus.PENDING.value, nullable=False, index=True)
    sync_action: str = Field(default=SyncAction.CREATE.value, nullable=False)

    # Boolean flag stored as integer, same as the original notes table
    is_deleted: int = 0  # Tombstone until the remote confirms the delete


class Note(NoteBase):
    """Public view of a note."""
    id: str
    tags: List[str] = []
    sync_status: SyncStatus = SyncStatus.PENDING

    @classmethod
    def from_record(cls, record: NoteRecord) -> "Note":
        return cls(
            id=record.id,
            title=record.title,
            body=record.body,
            tags=decode_tags(record.tags),
            created_at=record.created_at,
            updated_at=record.updated_at,
            sync_status=SyncStatus(record.sync_status),
        )

    def edited(self, **changes) -> "Note":
        """
        Return a copy with the given field changes and a fresh updated_at.

        This is how callers prepare a local edit before handing it to
        NoteStore.update_note().
        """
        changes.setdefault("updated_at", utcnow_iso())
        return self.model_copy(update=changes)


def new_note(title: str, body: str = "", tags: Optional[List[str]] = None) -> Note:
    """Build a note that has never been synced, with a client-side UUID."""
    now = utcnow_iso()
    return Note(
        id=str(uuid.uuid4()),
        title=title,
        body=body,
        tags=list(tags or []),
        created_at=now,
        updated_at=now,
        sync_status=SyncStatus.PENDING,
    )


class NoteFilter(BaseModel):
    """Optional constraints for listing notes."""
    search_query: Optional[str] = None  # Substring of title, body or tags
    tag: Optional[str] = None           # Exact tag match, applied after the text search
