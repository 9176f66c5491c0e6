"""
Root test configuration.

Test organization:
- unit/        Fast, isolated, no I/O, fake remotes
- integration/ Component boundaries, real I/O to temp locations

Run specific levels:
    pytest tests/unit -v           # Fast feedback loop
    pytest tests/integration -v    # Before commit
    pytest tests -v                # Everything
"""

import sys
from pathlib import Path
from urllib.parse import unquote, urlsplit

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
import requests


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Fast isolated tests")
    config.addinivalue_line("markers", "integration: Component boundary tests")


KV_URL = "https://kv.test"
KV_TOKEN = "kv-token"
BLOB_TOKEN = "blob-token"
BLOB_PUBLIC = "https://store.public.blob.test"


class FakeResponse:
    def __init__(self, status_code: int = 200, payload=None, content: bytes = b""):
        self.status_code = status_code
        self._payload = payload
        self.content = content

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)


class FakeRemote:
    """
    In-memory stand-in for the KV REST endpoint and the blob API.

    Passed to backends as their `requests.Session`. Flip `kv_down` or
    `blob_down` to simulate outages.
    """

    def __init__(self):
        self.kv: dict = {}
        self.blobs: dict = {}
        self.kv_down = False
        self.blob_down = False
        self.kv_requests = 0

    def _check(self, down: bool):
        if down:
            raise requests.ConnectionError("simulated outage")

    def post(self, url, json=None, headers=None, timeout=None, **kwargs):
        if url == KV_URL:
            self.kv_requests += 1
            self._check(self.kv_down)
            if headers.get("Authorization") != f"Bearer {KV_TOKEN}":
                return FakeResponse(401, {"error": "Unauthorized"})
            command, key, *rest = json
            if command == "GET":
                return FakeResponse(200, {"result": self.kv.get(key)})
            if command == "SET":
                self.kv[key] = rest[0]
                return FakeResponse(200, {"result": "OK"})
            return FakeResponse(200, {"error": f"unknown command {command}"})

        if url.endswith("/delete"):
            self._check(self.blob_down)
            for blob_url in json["urls"]:
                self.blobs.pop(blob_url, None)
            return FakeResponse(200, {})

        return FakeResponse(404)

    def put(self, url, data=None, headers=None, timeout=None, **kwargs):
        self._check(self.blob_down)
        # Like a real server: query and fragment never reach the pathname
        encoded = urlsplit(url).path.lstrip("/")
        public_url = f"{BLOB_PUBLIC}/{encoded}"
        self.blobs[public_url] = bytes(data)
        return FakeResponse(200, {"url": public_url, "pathname": unquote(encoded)})

    def get(self, url, timeout=None, **kwargs):
        self._check(self.blob_down)
        if url not in self.blobs:
            return FakeResponse(404)
        return FakeResponse(200, content=self.blobs[url])


@pytest.fixture
def remote():
    """Fake remote services (KV + blob)."""
    return FakeRemote()


@pytest.fixture
def kv_env():
    """General-purpose host with KV credentials only."""
    return {"KV_REST_API_URL": KV_URL, "KV_REST_API_TOKEN": KV_TOKEN}


@pytest.fixture
def full_env(kv_env):
    """General-purpose host with KV and blob credentials."""
    return {**kv_env, "BLOB_READ_WRITE_TOKEN": BLOB_TOKEN}


@pytest.fixture
def managed_env():
    """Managed platform with no credentials at all."""
    return {"VERCEL": "1", "VERCEL_ENV": "production"}
