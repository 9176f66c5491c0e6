"""
Remote key-value backend - Upstash Redis / Vercel KV over the REST API.

Each collection is one key holding the JSON-encoded array. Reads and writes
are a single request each:

    POST {url}  ["GET", "projects"]           -> {"result": "[...]"}
    POST {url}  ["SET", "projects", "[...]"]  -> {"result": "OK"}
"""

import json
from typing import Optional

import requests

from config import STORAGE_TIMEOUT
from .base import CollectionStore
from .environment import KVCredentials
from .errors import BackendUnavailable


class KVCollectionStore(CollectionStore):
    """Collection store backed by a Redis REST endpoint."""

    name = "kv"

    def __init__(
        self,
        credentials: KVCredentials,
        session: Optional[requests.Session] = None,
        timeout: float = STORAGE_TIMEOUT,
    ):
        self._credentials = credentials
        self._session = session or requests.Session()
        self._timeout = timeout

    def _command(self, *args):
        """Run one Redis command, returning its result."""
        try:
            resp = self._session.post(
                self._credentials.url,
                json=list(args),
                headers={"Authorization": f"Bearer {self._credentials.token}"},
                timeout=self._timeout,
            )
            resp.raise_for_status()
            payload = resp.json()
        except requests.RequestException as e:
            raise BackendUnavailable(f"KV {args[0]} failed: {e}") from e
        except ValueError as e:
            raise BackendUnavailable(f"KV {args[0]} returned invalid JSON: {e}") from e

        if not isinstance(payload, dict):
            raise BackendUnavailable(f"KV {args[0]} returned unexpected payload")
        if payload.get("error"):
            raise BackendUnavailable(f"KV {args[0]} error: {payload['error']}")
        return payload.get("result")

    def read_all(self, collection: str) -> list[dict]:
        raw = self._command("GET", collection)
        if raw is None:
            return []

        try:
            data = json.loads(raw) if isinstance(raw, str) else raw
        except json.JSONDecodeError as e:
            print(f"[WARN] Corrupt KV value for '{collection}', treating as empty: {e}")
            return []

        if not isinstance(data, list):
            print(f"[WARN] KV value for '{collection}' is not a list, treating as empty")
            return []
        return self._objects_only(collection, data)

    def write_all(self, collection: str, records: list[dict]) -> None:
        # The whole array goes out in one SET; a failed request leaves the old value
        self._command("SET", collection, json.dumps(list(records), ensure_ascii=False))
