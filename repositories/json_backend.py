"""
Local filesystem backends - the development fallback.

Directory structure:
    data/
        projects.json     - Project collection (JSON array)
        files.json        - FileMetadata collection (JSON array)
    uploads/
        {projectId}/{categoryId}/{filename}   - File content
"""

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Optional

from config import DATA_DIR, UPLOADS_DIR
from .base import BlobStore, CollectionStore
from .errors import BlobNotFound, Corrupted


class WriteQueue:
    """Thread-safe write serialization within one process."""

    def __init__(self):
        self._lock = threading.Lock()

    def write_json(self, path: Path, data) -> None:
        """Atomic JSON write: temp file in the same directory, then rename over."""
        with self._lock:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, temp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2, ensure_ascii=False)
                    f.write("\n")
                os.replace(temp, path)
            except BaseException:
                Path(temp).unlink(missing_ok=True)
                raise

    def write_bytes(self, path: Path, data: bytes) -> None:
        with self._lock:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)


_write_queue = WriteQueue()


class JsonCollectionStore(CollectionStore):
    """One JSON document per collection under the data directory."""

    name = "local"

    def __init__(self, base_path: Path = None):
        self._base_path = Path(base_path or DATA_DIR)

    def _collection_file(self, collection: str) -> Path:
        return self._base_path / f"{collection}.json"

    def _ensure_file(self, collection: str) -> Path:
        path = self._collection_file(collection)
        if not path.exists():
            _write_queue.write_json(path, [])
        return path

    def _load(self, path: Path) -> list[dict]:
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise Corrupted(f"{path}: {e}") from e

        if not isinstance(data, list):
            raise Corrupted(f"{path}: expected a JSON array, got {type(data).__name__}")
        return data

    def read_all(self, collection: str) -> list[dict]:
        path = self._ensure_file(collection)
        try:
            data = self._load(path)
        except Corrupted as e:
            # Self-healing: the next write replaces the broken document
            print(f"[WARN] Corrupt collection '{collection}', treating as empty: {e}")
            return []
        return self._objects_only(collection, data)

    def write_all(self, collection: str, records: list[dict]) -> None:
        _write_queue.write_json(self._collection_file(collection), list(records))


class LocalBlobStore(BlobStore):
    """Content on local disk at {root}/{projectId}/{categoryId}/{filename}."""

    name = "local"

    def __init__(self, base_path: Path = None):
        self._base_path = Path(base_path or UPLOADS_DIR)

    @property
    def root(self) -> Path:
        return self._base_path.resolve()

    def path_for(self, path: str) -> Path:
        """Filesystem path for a logical blob path. Rejects anything escaping the root."""
        parts = path.split("/")
        for part in parts:
            if not part or part in (".", "..") or "\\" in part or "\x00" in part:
                raise ValueError(f"Invalid blob path: {path!r}")
        return self.root.joinpath(*parts)

    def _resolve(self, locator: str) -> Path:
        candidate = Path(locator)
        if not candidate.is_absolute():
            return self.path_for(locator)

        resolved = candidate.resolve()
        if not resolved.is_relative_to(self.root):
            raise ValueError(f"Locator outside uploads root: {locator}")
        return resolved

    def put(self, path: str, data: bytes, content_type: Optional[str] = None) -> str:
        target = self.path_for(path)
        _write_queue.write_bytes(target, data)
        return str(target)

    def get(self, locator: str) -> bytes:
        try:
            return self._resolve(locator).read_bytes()
        except FileNotFoundError as e:
            raise BlobNotFound(locator) from e

    def delete(self, locator: str) -> None:
        target = self._resolve(locator)
        if not target.exists():
            print(f"[BLOB] Already gone: {target}")
            return
        target.unlink(missing_ok=True)
