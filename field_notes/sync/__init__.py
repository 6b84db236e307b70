from .engine import SyncEngine, SyncOutcome, SyncResult
from .factory import create_sync_engine

__all__ = ["SyncEngine", "SyncOutcome", "SyncResult", "create_sync_engine"]
