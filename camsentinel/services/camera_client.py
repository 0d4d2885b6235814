from __future__ import annotations

import logging

import requests
from requests.auth import HTTPDigestAuth

from camsentinel.errors import FetchError

logger = logging.getLogger(__name__)


class CameraClient:
    """HTTP client for the camera's still-picture endpoint.

    Issues a single Digest-authenticated GET per `fetch()` and returns the raw
    image bytes. There are no retries; a failure ends the current run.
    """

    def __init__(self, url: str, username: str, password: str, timeout: float = 15.0) -> None:
        self._url = url
        self._auth = HTTPDigestAuth(username, password)
        self._timeout = timeout

    @property
    def url(self) -> str:
        return self._url

    def fetch(self) -> bytes:
        try:
            r = requests.get(self._url, auth=self._auth, timeout=self._timeout)
            r.raise_for_status()
        except requests.RequestException as exc:
            raise FetchError(f"Failed to fetch image: {exc}") from exc
        if not r.content:
            raise FetchError("Failed to fetch image: empty response body")
        logger.debug("Fetched %d bytes from %s", len(r.content), self._url)
        return r.content
