"""
Environment detection.

Classifies the process as a managed (read-only filesystem) platform or a
general-purpose host, and works out which remote-store credentials are set.
Nothing here is cached: every backend decision re-reads the environment.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional


@dataclass(frozen=True)
class KVCredentials:
    url: str
    token: str


@dataclass(frozen=True)
class Environment:
    """Snapshot of the storage-relevant environment."""
    managed_platform: bool
    kv_credentials: Optional[KVCredentials] = None
    kv_url_present: bool = False
    blob_token: Optional[str] = None

    @property
    def remote_kv_available(self) -> bool:
        return self.kv_credentials is not None

    @property
    def remote_blob_available(self) -> bool:
        # Blob content needs a KV store alongside it for the metadata
        return bool(self.blob_token) and self.kv_url_present


# Checked in order - Vercel KV first, then plain Upstash
KV_CREDENTIAL_PAIRS = (
    ("KV_REST_API_URL", "KV_REST_API_TOKEN"),
    ("UPSTASH_REDIS_REST_URL", "UPSTASH_REDIS_REST_TOKEN"),
)


def _get(environ: Mapping[str, str], key: str) -> str:
    return (environ.get(key) or "").strip()


def is_managed_platform(environ: Mapping[str, str]) -> bool:
    """Vercel sets VERCEL=1 in deployments and VERCEL_ENV everywhere it runs."""
    return _get(environ, "VERCEL") == "1" or bool(_get(environ, "VERCEL_ENV"))


def kv_credentials(environ: Mapping[str, str]) -> Optional[KVCredentials]:
    """First complete URL + token pair, or None. Partial pairs count as absent."""
    for url_key, token_key in KV_CREDENTIAL_PAIRS:
        url = _get(environ, url_key)
        token = _get(environ, token_key)
        if url and token:
            return KVCredentials(url=url.rstrip("/"), token=token)
    return None


def classify(environ: Optional[Mapping[str, str]] = None) -> Environment:
    """Build an Environment from `environ` (defaults to os.environ)."""
    if environ is None:
        environ = os.environ

    return Environment(
        managed_platform=is_managed_platform(environ),
        kv_credentials=kv_credentials(environ),
        kv_url_present=any(_get(environ, url_key) for url_key, _ in KV_CREDENTIAL_PAIRS),
        blob_token=_get(environ, "BLOB_READ_WRITE_TOKEN") or None,
    )
