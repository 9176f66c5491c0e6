"""
Storage errors.

Record absence is not an error - repositories return None for that.
"""


class StorageError(Exception):
    """Base for every failure raised by the storage layer."""


class ConfigurationMissing(StorageError):
    """Remote credentials are required but absent. Fatal, never retried."""


class BackendUnavailable(StorageError):
    """A remote store failed. Callers may fall back to local storage when allowed."""


class Corrupted(StorageError):
    """A local document could not be parsed."""


class BlobNotFound(StorageError):
    """Blob content is gone."""
