"""
FileMetadata - one uploaded file.
"""

from typing import Optional
from pydantic import Field

from .base import Record, Timestamp, utcnow


class FileMetadata(Record):
    """
    Metadata for uploaded content.

    (project_id, category_id, filename) is unique within the collection.
    blob_url is set only when the content lives in the remote blob store;
    otherwise the content sits at uploads/<project_id>/<category_id>/<filename>.
    """
    project_id: str = Field(min_length=1)
    category_id: str = Field(min_length=1)
    filename: str = Field(min_length=1)        # Storage name, may be randomized
    original_name: str = ""                    # What the user uploaded, for display
    size: int = Field(default=0, ge=0)
    mime_type: str = "application/octet-stream"
    uploaded_at: Timestamp = Field(default_factory=utcnow)
    blob_url: Optional[str] = None

    @property
    def key(self) -> tuple[str, str, str]:
        return (self.project_id, self.category_id, self.filename)

    @property
    def blob_path(self) -> str:
        """Logical path handed to the blob store."""
        return "/".join(self.key)

    def matches(self, project_id: str, category_id: str, filename: str) -> bool:
        return self.key == (project_id, category_id, filename)
