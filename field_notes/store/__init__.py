from .record_store import NoteStore

__all__ = ["NoteStore"]
