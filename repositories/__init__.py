"""
Repository layer - abstracts persistence.

Usage:
    from repositories import get_repository

    repo = get_repository()
    project = repo.projects.create("Thesis")
    repo.files.save_content(project.id, "reports", "draft.pdf", data)

Backends (KV or local JSON, Vercel Blob or local disk) are picked per call
from the environment; see selector.py.
"""

from pathlib import Path
from typing import Mapping, Optional

from .base import BlobStore, CollectionStore, FileRepository, ProjectRepository, Repository
from .environment import Environment, classify
from .errors import BackendUnavailable, BlobNotFound, ConfigurationMissing, Corrupted, StorageError
from .records import StoredRepository
from .selector import BackendSelector, StoreResult

_instance: Optional[Repository] = None


def get_repository() -> Repository:
    """Get the configured repository instance."""
    global _instance

    if _instance is None:
        _instance = StoredRepository()

    return _instance


def configure_repository(
    environ: Optional[Mapping[str, str]] = None,
    data_dir: Path = None,
    uploads_dir: Path = None,
    session=None,
) -> Repository:
    """Replace the shared repository (tests, alternate data directories)."""
    global _instance
    _instance = StoredRepository(
        BackendSelector(environ=environ, data_dir=data_dir, uploads_dir=uploads_dir, session=session)
    )
    return _instance


__all__ = [
    "get_repository",
    "configure_repository",
    "Repository",
    "StoredRepository",
    "ProjectRepository",
    "FileRepository",
    "CollectionStore",
    "BlobStore",
    "BackendSelector",
    "StoreResult",
    "Environment",
    "classify",
    "StorageError",
    "ConfigurationMissing",
    "BackendUnavailable",
    "Corrupted",
    "BlobNotFound",
]
