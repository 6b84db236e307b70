from typing import Any, Dict

from fastapi import APIRouter

router = APIRouter()


@router.get("", response_model=Dict[str, str])
def health_check() -> Any:
    """
    Liveness of the note service.

    Sync clients poll this before a pass: any answer below 500 means the
    notes endpoints are reachable and pending changes can be pushed. The
    check does not touch the notes table, so a reachable service with a
    broken database still reports ok and the pass fails per record.
    """
    return {"status": "ok"}
