"""
Backend selection.

Collections:
    managed platform      -> KV, or ConfigurationMissing (no local fallback, ever)
    general-purpose host  -> KV if credentials are set, else local JSON
    KV failure on a general-purpose host -> local JSON for that one call

Blobs:
    Vercel Blob if its token (and a KV URL) is set, else local disk -
    independent of the managed-platform flag.

The environment is re-read on every call, so nothing is sticky: a call that
fell back to local storage does not affect the next one.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Generic, Mapping, Optional, TypeVar

import requests

from .base import BlobStore, CollectionStore
from .blob_backend import VercelBlobStore
from .environment import Environment, classify
from .errors import BackendUnavailable, ConfigurationMissing
from .json_backend import JsonCollectionStore, LocalBlobStore
from .kv_backend import KVCollectionStore

T = TypeVar("T")

KV_HINT = (
    "Set either KV_REST_API_URL/KV_REST_API_TOKEN (Vercel KV) or "
    "UPSTASH_REDIS_REST_URL/UPSTASH_REDIS_REST_TOKEN (Upstash Redis)."
)


@dataclass(frozen=True)
class StoreResult(Generic[T]):
    """Value of a collection operation plus the backend that produced it."""
    value: T
    backend: str
    fell_back: bool = False


class BackendSelector:
    """
    Picks storage backends from an Environment.

    `environ` pins the environment (tests); by default os.environ is
    classified afresh on every call.
    """

    def __init__(
        self,
        environ: Optional[Mapping[str, str]] = None,
        data_dir: Path = None,
        uploads_dir: Path = None,
        session: Optional[requests.Session] = None,
    ):
        self._environ = environ
        self._session = session
        self.local_collections = JsonCollectionStore(data_dir)
        self.local_blobs = LocalBlobStore(uploads_dir)

    @property
    def session(self) -> requests.Session:
        """HTTP session shared by every remote store this selector builds."""
        if self._session is None:
            self._session = requests.Session()
        return self._session

    def environment(self) -> Environment:
        return classify(self._environ)

    # Collections

    def select_collection_backend(self, env: Environment = None) -> CollectionStore:
        env = env or self.environment()
        if env.remote_kv_available:
            return KVCollectionStore(env.kv_credentials, session=self.session)
        if env.managed_platform:
            raise ConfigurationMissing(f"A KV store is required on this platform. {KV_HINT}")
        return self.local_collections

    def _run(self, op: Callable[[CollectionStore], T], what: str) -> StoreResult[T]:
        """Try the selected backend; fall back to local once when that is legal."""
        env = self.environment()
        store = self.select_collection_backend(env)

        try:
            return StoreResult(op(store), store.name)
        except BackendUnavailable as e:
            if env.managed_platform or store is self.local_collections:
                raise
            print(f"[STORAGE] {what} via {store.name} failed ({e}), falling back to local storage")

        return StoreResult(op(self.local_collections), self.local_collections.name, fell_back=True)

    def read_all(self, collection: str) -> StoreResult[list[dict]]:
        return self._run(lambda store: store.read_all(collection), f"read '{collection}'")

    def write_all(self, collection: str, records: list[dict]) -> StoreResult[None]:
        return self._run(lambda store: store.write_all(collection, records), f"write '{collection}'")

    def write_local(self, collection: str, records: list[dict]) -> StoreResult[None]:
        """Write straight to the local fallback - for a call whose read already fell back."""
        if self.environment().managed_platform:
            raise ConfigurationMissing(f"Local storage is not available on this platform. {KV_HINT}")
        self.local_collections.write_all(collection, records)
        return StoreResult(None, self.local_collections.name, fell_back=True)

    # Blobs

    def select_blob_backend(self, env: Environment = None) -> BlobStore:
        env = env or self.environment()
        if env.remote_blob_available:
            return VercelBlobStore(env.blob_token, session=self.session)
        return self.local_blobs

    def remote_blobs(self, require_token: bool = True) -> BlobStore:
        """
        Remote store for blobs already referenced by URL.

        Used regardless of the current blob backend so old records stay
        reachable. Public reads work without a token; deletes need one.
        """
        token = self.environment().blob_token
        if not token and require_token:
            raise ConfigurationMissing("BLOB_READ_WRITE_TOKEN is required to modify stored blobs.")
        return VercelBlobStore(token or "", session=self.session)
