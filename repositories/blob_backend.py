"""
Remote blob backend - Vercel Blob over its REST API.

Uploads go out in one PUT with the full payload. The service URL that
comes back is the locator; callers store it as FileMetadata.blob_url.
"""

from typing import Optional
from urllib.parse import quote

import requests

from config import BLOB_API_URL, BLOB_API_VERSION, STORAGE_TIMEOUT
from .base import BlobStore
from .errors import BackendUnavailable, BlobNotFound


class VercelBlobStore(BlobStore):
    """Public blobs, fixed pathnames (no random suffix), overwrite on conflict."""

    name = "vercel-blob"

    def __init__(
        self,
        token: str,
        session: Optional[requests.Session] = None,
        api_url: str = BLOB_API_URL,
        timeout: float = STORAGE_TIMEOUT,
    ):
        self._token = token
        self._session = session or requests.Session()
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout

    def _headers(self, **extra) -> dict:
        headers = {
            "authorization": f"Bearer {self._token}",
            "x-api-version": BLOB_API_VERSION,
        }
        headers.update(extra)
        return headers

    def put(self, path: str, data: bytes, content_type: Optional[str] = None) -> str:
        headers = self._headers(**{
            "x-add-random-suffix": "0",
            "x-allow-overwrite": "1",
        })
        if content_type:
            headers["x-content-type"] = content_type

        try:
            # Encoded so '#' or '?' in a component cannot truncate the pathname
            resp = self._session.put(
                f"{self._api_url}/{quote(path, safe='/')}",
                data=data,
                headers=headers,
                timeout=self._timeout,
            )
            resp.raise_for_status()
            url = resp.json().get("url")
        except requests.RequestException as e:
            print(f"[BLOB] Upload of {path} failed: {e}")
            raise BackendUnavailable(f"Blob upload failed: {e}") from e
        except ValueError as e:
            raise BackendUnavailable(f"Blob upload returned invalid JSON: {e}") from e

        if not url:
            raise BackendUnavailable(f"Blob upload of {path} returned no url")
        return url

    def get(self, locator: str) -> bytes:
        try:
            resp = self._session.get(locator, timeout=self._timeout)
        except requests.RequestException as e:
            raise BackendUnavailable(f"Blob download failed: {e}") from e

        if resp.status_code == 404:
            raise BlobNotFound(locator)
        try:
            resp.raise_for_status()
        except requests.HTTPError as e:
            raise BackendUnavailable(f"Blob download failed: {e}") from e
        return resp.content

    def delete(self, locator: str) -> None:
        try:
            resp = self._session.post(
                f"{self._api_url}/delete",
                json={"urls": [locator]},
                headers=self._headers(),
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise BackendUnavailable(f"Blob delete failed: {e}") from e

        if resp.status_code == 404:
            print(f"[BLOB] Already gone: {locator}")
            return
        try:
            resp.raise_for_status()
        except requests.HTTPError as e:
            raise BackendUnavailable(f"Blob delete failed: {e}") from e
