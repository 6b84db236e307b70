"""
Note Endpoints Module

This module provides the remote side of note sync: CRUD endpoints with
optimistic concurrency on update. Clients send the updatedAt they last saw;
if the stored copy is newer the update is refused with 409 and the stored
note is returned so the client can apply it.
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlmodel import Session, col, select

from field_notes.api.deps import get_db
from field_notes.models.note import encode_tags, parse_timestamp, utcnow_iso
from field_notes.models.remote import NotePayload, NoteUpdatePayload, RemoteNote
from field_notes.models.remote_note import RemoteNoteRow

router = APIRouter()


def _is_newer(stored: str, incoming: str) -> bool:
    try:
        incoming_at = parse_timestamp(incoming)
    except ValueError:
        raise HTTPException(status_code=422, detail=f"updatedAt is not an ISO-8601 timestamp: {incoming!r}")
    return parse_timestamp(stored) > incoming_at


@router.get("", response_model=List[RemoteNote], response_model_by_alias=True)
def list_notes(db: Session = Depends(get_db)):
    """
    Retrieve every stored note, most recently updated first.
    """
    statement = select(RemoteNoteRow).order_by(col(RemoteNoteRow.updated_at).desc())
    return [row.to_remote() for row in db.exec(statement).all()]


@router.get("/{note_id}", response_model=RemoteNote, response_model_by_alias=True)
def read_note(note_id: str, db: Session = Depends(get_db)):
    """
    Get a specific note by ID.

    Raises:
        HTTPException 404: If the note doesn't exist
    """
    row = db.get(RemoteNoteRow, note_id)
    if not row:
        raise HTTPException(status_code=404, detail="Note not found")
    return row.to_remote()


@router.post("", response_model=RemoteNote, response_model_by_alias=True, status_code=201)
def create_note(payload: NotePayload, db: Session = Depends(get_db)):
    """
    Create a note. The server assigns the id and both timestamps.

    Args:
        payload: Title, body and tags
        db: Database session

    Returns:
        RemoteNote: The canonical stored note
    """
    now = utcnow_iso()
    row = RemoteNoteRow(
        title=payload.title,
        body=payload.body,
        tags=encode_tags(payload.tags),
        created_at=now,
        updated_at=now,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row.to_remote()


@router.patch("/{note_id}", responses={409: {"model": RemoteNote}})
def update_note(note_id: str, payload: NoteUpdatePayload, db: Session = Depends(get_db)):
    """
    Update a note unless the stored copy is newer.

    An accepted update stores the writer's updatedAt, so the last writer's
    timestamp is what later updates are compared against.

    Args:
        note_id: ID of the note to update
        payload: New content plus the updatedAt the client last saw
        db: Database session

    Returns:
        dict: Success message

    Raises:
        HTTPException 404: If the note doesn't exist
        HTTPException 422: If updatedAt is not a timestamp
        409 response: Body is the stored note when it is newer than the payload
    """
    row = db.get(RemoteNoteRow, note_id)
    if not row:
        raise HTTPException(status_code=404, detail="Note not found")

    if _is_newer(row.updated_at, payload.updated_at):
        return JSONResponse(status_code=409, content=row.to_remote().to_wire())

    row.title = payload.title
    row.body = payload.body
    row.tags = encode_tags(payload.tags)
    row.updated_at = payload.updated_at

    db.add(row)
    db.commit()
    return {"status": "success", "detail": "Note updated"}


@router.delete("/{note_id}")
def delete_note(note_id: str, db: Session = Depends(get_db)):
    """
    Delete a note.

    Raises:
        HTTPException 404: If the note doesn't exist
    """
    row = db.get(RemoteNoteRow, note_id)
    if not row:
        raise HTTPException(status_code=404, detail="Note not found")

    db.delete(row)
    db.commit()
    return {"status": "success", "detail": "Note deleted"}
