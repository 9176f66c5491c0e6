"""
Configuration and shared settings for the project file store.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Paths
DATA_DIR = Path(os.environ.get("DATA_DIR", "data"))
UPLOADS_DIR = Path(os.environ.get("UPLOADS_DIR", "uploads"))

# Collection keys - used verbatim against the KV store and as local file stems
PROJECTS_KEY = "projects"
FILES_KEY = "files"

# Remote services
BLOB_API_URL = os.environ.get("BLOB_API_URL", "https://blob.vercel-storage.com").rstrip("/")
BLOB_API_VERSION = "7"


def _float(value: str, default: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


STORAGE_TIMEOUT = _float(os.environ.get("STORAGE_TIMEOUT"), 10.0)

# Admin
ADMIN_PASSWORD = (os.environ.get("ADMIN_PASSWORD") or "admin123").strip()  # Change this in production!
SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-change-me")
