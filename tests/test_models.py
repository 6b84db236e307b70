"""Tests for note models and wire schemas."""
from __future__ import annotations

from field_notes.models.note import (
    Note, SyncStatus, decode_tags, encode_tags, new_note, parse_timestamp,
)
from field_notes.models.remote import NoteUpdatePayload, RemoteNote


class TestTagCodec:

    def test_order_and_duplicates_survive(self):
        tags = ["b", "a", "b", "ünïcode"]
        assert decode_tags(encode_tags(tags)) == tags

    def test_non_ascii_stored_verbatim(self):
        assert encode_tags(["café"]) == '["café"]'

    def test_empty_column_decodes_to_empty_list(self):
        assert decode_tags(None) == []
        assert decode_tags("") == []
        assert decode_tags("[]") == []


class TestTimestamps:

    def test_zulu_suffix(self):
        assert parse_timestamp("2024-01-01T00:00:00Z") == parse_timestamp("2024-01-01T00:00:00+00:00")

    def test_naive_taken_as_utc(self):
        assert parse_timestamp("2024-01-01T00:00:00") == parse_timestamp("2024-01-01T00:00:00+00:00")

    def test_offsets_compare_by_instant(self):
        assert parse_timestamp("2024-01-01T02:00:00+02:00") == parse_timestamp("2024-01-01T00:00:00Z")


class TestNote:

    def test_new_note_defaults(self):
        note = new_note("Title", tags=["x"])
        assert len(note.id) == 36
        assert note.created_at == note.updated_at
        assert note.sync_status == SyncStatus.PENDING
        assert note.body == ""

    def test_new_notes_get_distinct_ids(self):
        assert new_note("a").id != new_note("a").id

    def test_edited_refreshes_updated_at(self):
        note = Note(id="n", title="t", created_at="2024-01-01T00:00:00+00:00",
                    updated_at="2024-01-01T00:00:00+00:00")
        changed = note.edited(title="new")
        assert changed.title == "new"
        assert changed.updated_at > note.updated_at
        assert note.title == "t"

    def test_edited_keeps_explicit_timestamp(self):
        note = new_note("t")
        stamp = "2999-01-01T00:00:00+00:00"
        assert note.edited(updated_at=stamp).updated_at == stamp


class TestWireFormat:

    def test_update_payload_uses_camel_case(self):
        payload = NoteUpdatePayload(title="t", body="b", tags=["x"], updated_at="2024-01-01T00:00:00+00:00")
        assert payload.to_wire() == {
            "title": "t",
            "body": "b",
            "tags": ["x"],
            "updatedAt": "2024-01-01T00:00:00+00:00",
        }

    def test_remote_note_parses_camel_case(self):
        note = RemoteNote.model_validate({
            "id": "srv-1",
            "title": "t",
            "body": "b",
            "tags": ["x"],
            "createdAt": "2024-01-01T00:00:00+00:00",
            "updatedAt": "2024-01-02T00:00:00+00:00",
        })
        assert note.created_at == "2024-01-01T00:00:00+00:00"
        assert note.updated_at == "2024-01-02T00:00:00+00:00"
