"""
Configuration and file models.
"""

from .config import ConnectionProfile, Settings
from .models import FileMetadata, StoredFile

__all__ = ["ConnectionProfile", "Settings", "FileMetadata", "StoredFile"]
