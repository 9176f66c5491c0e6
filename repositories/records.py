"""
Project and file repositories over the selected storage backends.

Every mutation is read-all -> change in memory -> write-all. Concurrent
mutations race and the last write-all wins for the whole collection.
"""

from __future__ import annotations

import mimetypes
import time
from typing import Optional

from werkzeug.utils import secure_filename

from config import FILES_KEY, PROJECTS_KEY
from models import FileMetadata, Project
from .base import FileRepository, ProjectRepository, Repository
from .selector import BackendSelector, StoreResult


class CollectionSession:
    """
    One repository call's view of a collection.

    If the read had to fall back to local storage, the write goes there too,
    so a fallback read never overwrites the remote collection.
    """

    def __init__(self, selector: BackendSelector, collection: str):
        self._selector = selector
        self._collection = collection
        self._read: Optional[StoreResult] = None

    def load(self) -> list[dict]:
        self._read = self._selector.read_all(self._collection)
        return self._read.value

    def save(self, records: list[dict]) -> None:
        if self._read is not None and self._read.fell_back:
            self._selector.write_local(self._collection, records)
        else:
            self._selector.write_all(self._collection, records)


def _parse(model, records: list[dict]) -> list:
    items = []
    for data in records:
        try:
            items.append(model.from_record(data))
        except ValueError as e:
            print(f"[WARN] Skipping invalid {model.__name__} record {data.get('id')!r}: {e}")
    return items


def storage_filename(original_name: str) -> str:
    """Timestamp-prefixed, filesystem and URL safe name."""
    safe = secure_filename(original_name or "") or "file"
    return f"{int(time.time() * 1000)}-{safe}"


class StoredFileRepository(FileRepository):
    """File metadata in the "files" collection, content in the blob store."""

    def __init__(self, selector: BackendSelector):
        self._selector = selector

    def _session(self) -> CollectionSession:
        return CollectionSession(self._selector, FILES_KEY)

    def list(self) -> list[FileMetadata]:
        return _parse(FileMetadata, self._selector.read_all(FILES_KEY).value)

    def get(self, id: str) -> Optional[FileMetadata]:
        return next((f for f in self.list() if f.id == id), None)

    def exists(self, id: str) -> bool:
        return self.get(id) is not None

    def list_by_project(self, project_id: str) -> list[FileMetadata]:
        return [f for f in self.list() if f.project_id == project_id]

    def list_by_category(self, project_id: str, category_id: str) -> list[FileMetadata]:
        return [
            f for f in self.list()
            if f.project_id == project_id and f.category_id == category_id
        ]

    def find(self, project_id: str, category_id: str, filename: str) -> Optional[FileMetadata]:
        return next(
            (f for f in self.list() if f.matches(project_id, category_id, filename)),
            None,
        )

    def get_blob_url(self, project_id: str, category_id: str, filename: str) -> Optional[str]:
        record = self.find(project_id, category_id, filename)
        return record.blob_url if record else None

    def save_content(
        self,
        project_id: str,
        category_id: str,
        original_name: str,
        data: bytes,
        mime_type: Optional[str] = None,
        filename: Optional[str] = None,
    ) -> FileMetadata:
        record = FileMetadata(
            project_id=project_id,
            category_id=category_id,
            filename=filename or storage_filename(original_name),
            original_name=original_name,
            size=len(data),
            mime_type=mime_type or mimetypes.guess_type(original_name)[0] or "application/octet-stream",
        )

        # Load first so an unusable collection backend fails before any content is stored
        session = self._session()
        records = [r for r in session.load() if not _same_key(r, record)]

        # Content before metadata: metadata only ever points at content that was written
        store = self._selector.select_blob_backend()
        locator = store.put(record.blob_path, data, content_type=record.mime_type)
        if store is not self._selector.local_blobs:
            record.blob_url = locator

        records.append(record.to_record())
        session.save(records)

        print(f"[STORAGE] Saved {record.blob_path} ({record.size} bytes) via {store.name}")
        return record

    def read_content(self, record: FileMetadata) -> bytes:
        if record.blob_url:
            return self._selector.remote_blobs(require_token=False).get(record.blob_url)
        return self._selector.local_blobs.get(record.blob_path)

    def _delete_blob(self, record: FileMetadata) -> None:
        if record.blob_url:
            self._selector.remote_blobs().delete(record.blob_url)
        else:
            self._selector.local_blobs.delete(record.blob_path)

    def delete_content(self, project_id: str, category_id: str, filename: str) -> bool:
        session = self._session()
        records = session.load()
        target = next(
            (f for f in _parse(FileMetadata, records) if f.matches(project_id, category_id, filename)),
            None,
        )
        if target is None:
            return False

        # Content, then metadata: a crash in between leaves dead metadata, never an orphaned blob
        self._delete_blob(target)
        session.save([r for r in records if not _same_key(r, target)])
        return True

    def delete_for_project(self, project_id: str) -> int:
        """Delete every file of a project. Returns how many were removed."""
        session = self._session()
        records = session.load()
        doomed = [f for f in _parse(FileMetadata, records) if f.project_id == project_id]
        if not doomed:
            return 0

        for record in doomed:
            self._delete_blob(record)

        session.save([r for r in records if r.get("projectId") != project_id])
        return len(doomed)


def _same_key(data: dict, record: FileMetadata) -> bool:
    return (data.get("projectId"), data.get("categoryId"), data.get("filename")) == record.key


class StoredProjectRepository(ProjectRepository):
    """Projects in the "projects" collection."""

    def __init__(self, selector: BackendSelector, files: StoredFileRepository):
        self._selector = selector
        self._files = files

    def _session(self) -> CollectionSession:
        return CollectionSession(self._selector, PROJECTS_KEY)

    def list(self) -> list[Project]:
        return _parse(Project, self._selector.read_all(PROJECTS_KEY).value)

    def get(self, id: str) -> Optional[Project]:
        return next((p for p in self.list() if p.id == id), None)

    def exists(self, id: str) -> bool:
        return self.get(id) is not None

    def create(
        self,
        name: str,
        description: Optional[str] = None,
        module_name: Optional[str] = None,
        supervisor_name: Optional[str] = None,
    ) -> Project:
        project = Project(
            name=name,
            description=description,
            module_name=module_name,
            supervisor_name=supervisor_name,
        )

        session = self._session()
        records = session.load()
        records.append(project.to_record())
        session.save(records)
        return project

    def update(self, id: str, **changes) -> Optional[Project]:
        session = self._session()
        records = session.load()

        for index, data in enumerate(records):
            if data.get("id") != id:
                continue
            project = Project.from_record(data)
            project.apply(**changes)
            records[index] = project.to_record()
            session.save(records)
            return project

        return None

    def delete(self, id: str) -> bool:
        if not self.exists(id):
            return False

        # Files first, so no file record outlives its project
        removed = self._files.delete_for_project(id)

        session = self._session()
        records = session.load()
        session.save([r for r in records if r.get("id") != id])
        print(f"[STORAGE] Deleted project {id} and {removed} file(s)")
        return True


class StoredRepository(Repository):
    """Aggregate over the runtime-selected backends."""

    def __init__(self, selector: BackendSelector = None):
        self.selector = selector or BackendSelector()
        self._files = StoredFileRepository(self.selector)
        self._projects = StoredProjectRepository(self.selector, self._files)

    @property
    def projects(self) -> ProjectRepository:
        return self._projects

    @property
    def files(self) -> FileRepository:
        return self._files
