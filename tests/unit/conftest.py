"""
Unit test fixtures.

All unit tests should be:
- Fast (< 100ms)
- Isolated (no network, fakes for remote services)
- Deterministic (same result every time)
"""

import pytest
from datetime import datetime, timezone


@pytest.fixture
def fixed_time():
    """Fixed datetime for deterministic tests."""
    return datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def project_data():
    """Raw project record, as stored."""
    return {
        "id": "1705320000000",
        "name": "Thesis",
        "description": "Final year project",
        "moduleName": "CS3000",
        "supervisorName": "Dr. Smith",
        "createdAt": "2024-01-15T12:00:00.000Z",
        "updatedAt": "2024-01-15T12:30:00.000Z",
    }


@pytest.fixture
def file_data():
    """Raw file metadata record, as stored."""
    return {
        "id": "f1",
        "projectId": "1705320000000",
        "categoryId": "reports",
        "filename": "1705320000000-draft.pdf",
        "originalName": "draft.pdf",
        "size": 1024,
        "mimeType": "application/pdf",
        "uploadedAt": "2024-01-15T12:00:00.000Z",
    }
