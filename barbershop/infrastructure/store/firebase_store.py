from __future__ import annotations

import json
import logging
import threading
from typing import Any

import httpx

from barbershop.application.exceptions import StoreUnavailable
from barbershop.application.ports.document_store import ChangeCallback, DocumentStorePort, Unsubscribe
from barbershop.core.config import settings

STREAM_EVENTS = {"put", "patch"}
CLOSING_EVENTS = {"cancel", "auth_revoked"}


class FirebaseDocumentStore(DocumentStorePort):
    """Realtime Database over its REST API: GET/PUT/DELETE on {url}/{path}.json."""

    def __init__(
        self,
        database_url: str | None = None,
        auth_token: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._base_url = (database_url or settings.FIREBASE_DATABASE_URL or "").rstrip("/")
        self._auth_token = auth_token or settings.FIREBASE_AUTH_TOKEN
        self._timeout = timeout or settings.FIREBASE_TIMEOUT_SECONDS
        if not self._base_url:
            raise ValueError("FIREBASE_DATABASE_URL is required for the Firebase store")

        self._transport = transport
        self._client = httpx.Client(timeout=self._timeout, transport=transport)
        self._logger = logging.getLogger(__name__)

    def _url(self, path: str) -> str:
        return f"{self._base_url}/{path.strip('/')}.json"

    def _params(self) -> dict[str, str]:
        return {"auth": self._auth_token} if self._auth_token else {}

    def get(self, path: str) -> Any:
        try:
            response = self._client.get(self._url(path), params=self._params())
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, ValueError) as e:
            self._logger.error("Error reading from store", extra={"path": path, "error": str(e)})
            raise StoreUnavailable("Could not read from the appointment store") from e

    def set(self, path: str, value: Any) -> None:
        if value is None:
            self.remove(path)
            return
        try:
            response = self._client.put(self._url(path), params=self._params(), json=value)
            response.raise_for_status()
        except httpx.HTTPError as e:
            self._logger.error("Error writing to store", extra={"path": path, "error": str(e)})
            raise StoreUnavailable("Could not save to the appointment store") from e

    def remove(self, path: str) -> None:
        try:
            response = self._client.delete(self._url(path), params=self._params())
            response.raise_for_status()
        except httpx.HTTPError as e:
            self._logger.error("Error removing from store", extra={"path": path, "error": str(e)})
            raise StoreUnavailable("Could not update the appointment store") from e

    def subscribe(self, path: str, callback: ChangeCallback) -> Unsubscribe:
        stop = threading.Event()
        worker = threading.Thread(
            target=self._listen,
            args=(path, callback, stop),
            name=f"firebase-stream:{path}",
            daemon=True,
        )
        worker.start()
        return stop.set

    def _listen(self, path: str, callback: ChangeCallback, stop: threading.Event) -> None:
        """Follow the server-sent event stream for path until stopped or closed by the server."""
        headers = {"Accept": "text/event-stream"}
        try:
            with httpx.Client(timeout=None, transport=self._transport) as client:
                with client.stream("GET", self._url(path), params=self._params(), headers=headers) as response:
                    response.raise_for_status()
                    event: str | None = None
                    for line in response.iter_lines():
                        if stop.is_set():
                            return
                        if line.startswith("event:"):
                            event = line[len("event:"):].strip()
                            if event in CLOSING_EVENTS:
                                self._logger.warning("Store stream closed", extra={"path": path, "reason": event})
                                return
                        elif line.startswith("data:") and event in STREAM_EVENTS:
                            payload = json.loads(line[len("data:"):].strip() or "null") or {}
                            changed = str(payload.get("path", "/")).strip("/")
                            changed_path = "/".join(part for part in (path.strip("/"), changed) if part)
                            try:
                                callback(changed_path)
                            except Exception:
                                self._logger.exception("Change subscriber failed", extra={"path": changed_path})
        except (httpx.HTTPError, ValueError) as e:
            self._logger.error("Store stream failed", extra={"path": path, "error": str(e)})
