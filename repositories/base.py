"""
Repository base classes - define the interfaces.

Two storage layers sit under the typed repositories:
- CollectionStore: a named JSON collection, read and replaced as a whole
- BlobStore: binary content addressed by a caller-supplied path
"""

from abc import ABC, abstractmethod
from typing import Generic, Optional, TypeVar

from models import FileMetadata, Project

T = TypeVar("T")


class CollectionStore(ABC):
    """
    Whole-collection persistence.

    Implementations keep no state between calls; every call round-trips
    the full collection.
    """

    name: str = "collection"

    @abstractmethod
    def read_all(self, collection: str) -> list[dict]:
        """All records. Empty list if the collection was never written."""
        pass

    @abstractmethod
    def write_all(self, collection: str, records: list[dict]) -> None:
        """Replace the stored collection. No partial document may become visible."""
        pass

    def _objects_only(self, collection: str, items: list) -> list[dict]:
        """Drop array elements that are not JSON objects."""
        records = [item for item in items if isinstance(item, dict)]
        if len(records) != len(items):
            print(
                f"[WARN] Dropped {len(items) - len(records)} non-object element(s) "
                f"from {self.name} collection '{collection}'"
            )
        return records


class BlobStore(ABC):
    """Binary content storage."""

    name: str = "blob"

    @abstractmethod
    def put(self, path: str, data: bytes, content_type: Optional[str] = None) -> str:
        """Store content at `path` (overwriting). Returns a locator (URL or filesystem path)."""
        pass

    @abstractmethod
    def get(self, locator: str) -> bytes:
        """Read content back. Raises BlobNotFound when it is gone."""
        pass

    @abstractmethod
    def delete(self, locator: str) -> None:
        """Remove content. Deleting something already gone is not an error."""
        pass


class BaseRepository(ABC, Generic[T]):
    """Abstract base for entity repositories."""

    @abstractmethod
    def get(self, id: str) -> Optional[T]:
        """Get entity by ID."""
        pass

    @abstractmethod
    def list(self) -> list[T]:
        """List all entities."""
        pass

    @abstractmethod
    def exists(self, id: str) -> bool:
        """Check if entity exists."""
        pass


class ProjectRepository(BaseRepository[Project]):
    """Repository for projects."""

    @abstractmethod
    def create(
        self,
        name: str,
        description: Optional[str] = None,
        module_name: Optional[str] = None,
        supervisor_name: Optional[str] = None,
    ) -> Project:
        """Create a project with a fresh id and equal timestamps."""
        pass

    @abstractmethod
    def update(self, id: str, **changes) -> Optional[Project]:
        """Apply a partial update. None if no such project."""
        pass

    @abstractmethod
    def delete(self, id: str) -> bool:
        """Delete project and its files. Returns True if deleted."""
        pass


class FileRepository(BaseRepository[FileMetadata]):
    """Repository for file metadata and content."""

    @abstractmethod
    def list_by_project(self, project_id: str) -> list[FileMetadata]:
        pass

    @abstractmethod
    def list_by_category(self, project_id: str, category_id: str) -> list[FileMetadata]:
        pass

    @abstractmethod
    def find(self, project_id: str, category_id: str, filename: str) -> Optional[FileMetadata]:
        """Look up by the (project, category, filename) key."""
        pass

    @abstractmethod
    def save_content(
        self,
        project_id: str,
        category_id: str,
        original_name: str,
        data: bytes,
        mime_type: Optional[str] = None,
        filename: Optional[str] = None,
    ) -> FileMetadata:
        """Store content, then record its metadata."""
        pass

    @abstractmethod
    def read_content(self, record: FileMetadata) -> bytes:
        """Raw bytes for a stored file."""
        pass

    @abstractmethod
    def delete_content(self, project_id: str, category_id: str, filename: str) -> bool:
        """Delete content, then metadata. False if no such file."""
        pass


class Repository:
    """
    Aggregate repository - provides access to all entity repositories.

    This is what consumers use.
    """

    @property
    @abstractmethod
    def projects(self) -> ProjectRepository:
        """Access project repository."""
        pass

    @property
    @abstractmethod
    def files(self) -> FileRepository:
        """Access file repository."""
        pass
