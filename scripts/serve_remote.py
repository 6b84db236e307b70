"""
Serve the reference remote notes API on 127.0.0.1:8000.
"""
import uvicorn

from field_notes.core.config import settings
from field_notes.main import create_app

if __name__ == "__main__":
    print(f"--- Serving remote notes API from {settings.REMOTE_DATABASE_URL} ---")
    uvicorn.run(create_app(), host="127.0.0.1", port=8000)
