"""
Remote Client Module

The contract the sync engine uses to reach the remote notes service, and an
HTTP implementation built on requests.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, List, Optional

import requests
from pydantic import ValidationError

from field_notes.core.errors import (
    RemoteNotFound, RemoteRequestError, RemoteUnavailable,
)
from field_notes.models.remote import NotePayload, NoteUpdatePayload, RemoteNote

logger = logging.getLogger(__name__)


class RemoteClient(ABC):
    """Four remote operations on notes."""

    @abstractmethod
    def fetch_all(self) -> List[RemoteNote]:
        """List every note the remote holds."""

    @abstractmethod
    def create(self, payload: NotePayload) -> RemoteNote:
        """Create a note; the remote assigns id and timestamps."""

    @abstractmethod
    def update(self, note_id: str, payload: NoteUpdatePayload) -> Optional[RemoteNote]:
        """
        Push an update.

        Returns:
            None if the update was accepted, or the remote's current note if
            the remote reports a conflict (its copy is newer).

        Raises:
            RemoteNotFound: If the remote has no such note
            RemoteError: On any other failure
        """

    @abstractmethod
    def delete(self, note_id: str) -> None:
        """Delete a note. A missing note raises RemoteNotFound."""


class HttpRemoteClient(RemoteClient):
    """
    RemoteClient talking JSON over HTTP.

    Args:
        base_url: API root, e.g. "http://127.0.0.1:8000/api/v1"
        session: Anything with a requests-compatible request() method.
            Defaults to a new requests.Session.
        timeout: Seconds per request
    """

    def __init__(self, base_url: str, session: Any = None, timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout

    def _request(self, method: str, path: str, json: Optional[dict] = None):
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, json=json, timeout=self.timeout)
        except requests.RequestException as exc:
            raise RemoteUnavailable(f"{method} {url} failed: {exc}") from exc

        status = response.status_code
        if status == 404:
            raise RemoteNotFound(f"{method} {url}: not found", status_code=status)
        if status >= 500:
            raise RemoteUnavailable(f"{method} {url}: server error {status}", status_code=status)
        return response

    @staticmethod
    def _decode(method: str, response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise RemoteRequestError(
                f"{method} returned a body that is not JSON: {exc}",
                status_code=response.status_code,
            ) from exc

    @staticmethod
    def _parse_note(method: str, response, data: Any) -> RemoteNote:
        try:
            return RemoteNote.model_validate(data)
        except ValidationError as exc:
            raise RemoteRequestError(
                f"{method} returned a malformed note: {exc}",
                status_code=response.status_code,
            ) from exc

    @staticmethod
    def _raise_for_status(method: str, response) -> None:
        if not 200 <= response.status_code < 300:
            raise RemoteRequestError(
                f"{method} rejected with status {response.status_code}",
                status_code=response.status_code,
            )

    def fetch_all(self) -> List[RemoteNote]:
        response = self._request("GET", "/notes")
        self._raise_for_status("GET", response)
        data = self._decode("GET", response)
        # Some deployments wrap the listing as {"items": [...]}
        if isinstance(data, dict):
            data = data.get("items", [])
        if not isinstance(data, list):
            raise RemoteRequestError(
                f"GET returned {type(data).__name__} instead of a note listing",
                status_code=response.status_code,
            )
        return [self._parse_note("GET", response, item) for item in data]

    def create(self, payload: NotePayload) -> RemoteNote:
        response = self._request("POST", "/notes", json=payload.to_wire())
        self._raise_for_status("POST", response)
        return self._parse_note("POST", response, self._decode("POST", response))

    def update(self, note_id: str, payload: NoteUpdatePayload) -> Optional[RemoteNote]:
        response = self._request("PATCH", f"/notes/{note_id}", json=payload.to_wire())
        if response.status_code == 409:
            logger.debug("Update of %s conflicts with the remote copy", note_id)
            return self._parse_note("PATCH", response, self._decode("PATCH", response))
        self._raise_for_status("PATCH", response)
        return None

    def delete(self, note_id: str) -> None:
        response = self._request("DELETE", f"/notes/{note_id}")
        self._raise_for_status("DELETE", response)

