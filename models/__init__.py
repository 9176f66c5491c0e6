"""
Domain models - single source of truth for stored records.

Design principles:
- Every entity defined once
- Validation at the boundary
- Backend-agnostic (repository handles persistence)
"""

from .base import BaseEntity, Record, TimestampMixin, format_timestamp, new_id, utcnow
from .project import Project, ProjectUpdate
from .file import FileMetadata

__all__ = [
    # Base
    "BaseEntity",
    "Record",
    "TimestampMixin",
    "format_timestamp",
    "new_id",
    "utcnow",
    # Project
    "Project",
    "ProjectUpdate",
    # Files
    "FileMetadata",
]
