"""
Error Types Module

Local store integrity errors are surfaced to callers. Remote errors are
raised by the remote client and contained per record by the sync engine.
A 409 conflict is not an error: the client returns the server's note.
"""
from typing import Optional


class NoteStoreError(Exception):
    """Base class for local store failures."""


class DuplicateId(NoteStoreError):
    """A note with this id already exists in the local store."""

    def __init__(self, note_id: str):
        super().__init__(f"Note {note_id!r} already exists")
        self.note_id = note_id


class IdConflict(NoteStoreError):
    """Renaming a note would collide with an existing id."""

    def __init__(self, old_id: str, new_id: str):
        super().__init__(f"Cannot rename note {old_id!r}: id {new_id!r} is taken")
        self.old_id = old_id
        self.new_id = new_id


class NoteNotFound(NoteStoreError):
    """The note is absent (or only present as a tombstone)."""

    def __init__(self, note_id: str):
        super().__init__(f"Note {note_id!r} not found")
        self.note_id = note_id


class RemoteError(Exception):
    """Base class for failures talking to the remote notes service."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RemoteUnavailable(RemoteError):
    """Network error, timeout or 5xx response."""


class RemoteNotFound(RemoteError):
    """The remote has no note with the requested id (404)."""


class RemoteRequestError(RemoteError):
    """Any other non-2xx response, e.g. a rejected payload."""
