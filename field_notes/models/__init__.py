from .note import (
    Note, NoteRecord, NoteFilter, SyncStatus, SyncAction,
    new_note, encode_tags, decode_tags, utcnow_iso,
)
from .remote import NotePayload, NoteUpdatePayload, RemoteNote
from .remote_note import RemoteNoteRow

__all__ = [
    "Note", "NoteRecord", "NoteFilter",
    "SyncStatus", "SyncAction",
    "new_note", "encode_tags", "decode_tags", "utcnow_iso",
    "NotePayload", "NoteUpdatePayload", "RemoteNote",
    "RemoteNoteRow",
]
