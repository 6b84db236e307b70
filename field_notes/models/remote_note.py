"""
Remote Note Table Module

Storage for the reference remote service (field_notes.main). The local store
never touches this table.
"""
import uuid

from sqlmodel import SQLModel, Field

from field_notes.models.note import decode_tags, utcnow_iso
from field_notes.models.remote import RemoteNote


class RemoteNoteRow(SQLModel, table=True):
    """
    Server-side note row. Ids are assigned by the server.
    """
    __tablename__ = "remote_notes"

    id: str = Field(default_factory=lambda: uuid.uuid4().hex, primary_key=True)
    title: str = Field(nullable=False)
    body: str = Field(default="", nullable=False)

    # Tags stored as JSON string array
    tags: str = Field(default="[]", nullable=False)

    created_at: str = Field(default_factory=utcnow_iso, nullable=False)
    updated_at: str = Field(default_factory=utcnow_iso, nullable=False)

    def to_remote(self) -> RemoteNote:
        return RemoteNote(
            id=self.id,
            title=self.title,
            body=self.body,
            tags=decode_tags(self.tags),
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
