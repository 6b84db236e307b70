from typing import Optional, Sequence

from sqlalchemy import Table
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine

from field_notes.models.note import NoteRecord


def create_db_engine(db_url: str) -> Engine:
    # SQLite fix for multithreading
    connect_args = {"check_same_thread": False} if db_url.startswith("sqlite") else {}
    return create_engine(db_url, connect_args=connect_args)


def init_db(engine: Engine, tables: Optional[Sequence[Table]] = None) -> Engine:
    """
    Create tables if they don't exist.

    Defaults to the local store's notes table; the reference remote service
    passes its own table list.
    """
    if tables is None:
        tables = [NoteRecord.__table__]
    SQLModel.metadata.create_all(engine, tables=list(tables))
    return engine
