from .client import RemoteClient, HttpRemoteClient
from .connectivity import RemoteHealthProbe, StaticConnectivity

__all__ = [
    "RemoteClient", "HttpRemoteClient",
    "RemoteHealthProbe", "StaticConnectivity",
]
