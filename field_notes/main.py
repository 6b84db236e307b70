"""
Reference remote notes service.

Serves the notes API the sync engine talks to, for local development and
tests. Run it with scripts/serve_remote.py.
"""
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.engine import Engine

from field_notes.api.v1.api import api_router
from field_notes.core.config import settings
from field_notes.db.session import create_db_engine, init_db
from field_notes.models.remote_note import RemoteNoteRow


def create_app(engine: Optional[Engine] = None) -> FastAPI:
    if engine is None:
        engine = create_db_engine(settings.REMOTE_DATABASE_URL)
    init_db(engine, tables=[RemoteNoteRow.__table__])

    app = FastAPI(
        title=f"{settings.PROJECT_NAME} Remote",
        version=settings.VERSION,
        openapi_url=f"{settings.API_V1_STR}/openapi.json"
    )
    app.state.engine = engine

    # Set up CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Development service, any origin
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix=settings.API_V1_STR)
    return app
