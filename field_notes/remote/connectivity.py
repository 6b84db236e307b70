"""
Connectivity Probes

The sync engine accepts any zero-argument callable returning whether the
network is usable. These are the two it ships with.
"""
import logging
from typing import Any

import requests

logger = logging.getLogger(__name__)


class RemoteHealthProbe:
    """
    Reports online when the remote's health endpoint answers.

    Any response below 500 counts as reachable; transport errors and 5xx
    count as offline.
    """

    def __init__(self, base_url: str, session: Any = None, timeout: float = 3.0):
        self.health_url = f"{base_url.rstrip('/')}/health"
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout

    def __call__(self) -> bool:
        try:
            response = self.session.request("GET", self.health_url, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.info("Remote unreachable: %s", exc)
            return False
        return response.status_code < 500


class StaticConnectivity:
    """Fixed answer, for scripts forcing a mode and for tests."""

    def __init__(self, online: bool = True):
        self.online = online

    def __call__(self) -> bool:
        return self.online
