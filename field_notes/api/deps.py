"""
API Dependencies Module

Database session dependency for the reference remote service. The engine is
attached to the application at creation time (see field_notes.main).
"""
from typing import Generator

from fastapi import Request
from sqlmodel import Session


def get_db(request: Request) -> Generator[Session, None, None]:
    with Session(request.app.state.engine) as session:
        yield session
