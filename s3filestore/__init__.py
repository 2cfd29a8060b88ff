"""
S3-compatible file store adapter.

Stores, fetches and deletes files with descriptive metadata in an
S3-compatible bucket on behalf of a host content-management system.
"""

from s3filestore.core.config import ConnectionProfile, Settings
from s3filestore.core.models import FileMetadata, StoredFile
from s3filestore.storage import S3StorageAdapter, StorageError, StorageRegistry

__version__ = "0.1.0"

__all__ = [
    "ConnectionProfile",
    "Settings",
    "FileMetadata",
    "StoredFile",
    "S3StorageAdapter",
    "StorageError",
    "StorageRegistry",
]
