"""
Integration test fixtures.

Integration tests:
- Test component boundaries
- Use real I/O but to temp locations
- Remote services are the in-memory FakeRemote
"""

import pytest
import tempfile
import shutil
from pathlib import Path

from repositories import BackendSelector, StoredRepository


@pytest.fixture
def temp_dir():
    """Temporary directory for test data."""
    d = tempfile.mkdtemp()
    yield Path(d)
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def data_dir(temp_dir):
    """Local collection directory (not created up front)."""
    return temp_dir / "data"


@pytest.fixture
def uploads_dir(temp_dir):
    """Local blob directory (not created up front)."""
    return temp_dir / "uploads"


@pytest.fixture
def make_repo(data_dir, uploads_dir, remote):
    """Build a repository over a pinned environment."""
    def make(environ):
        selector = BackendSelector(
            environ=environ,
            data_dir=data_dir,
            uploads_dir=uploads_dir,
            session=remote,
        )
        return StoredRepository(selector)
    return make
