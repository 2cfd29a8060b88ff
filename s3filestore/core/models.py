"""
File models for the S3 file store.

This module defines the host-facing file record and the schema of the
user metadata attached to every stored object:
- StoredFile: a file as seen by the host (metadata plus optional content)
- FileMetadata: the four metadata entries written on every upload
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

DEFAULT_MIME_TYPE = "application/octet-stream"

# Wire keys of the S3 user metadata
METADATA_MIME_TYPE = "mimeType"
METADATA_SIZE = "size"
METADATA_TITLE = "title"
METADATA_ORIGIN = "origin"


def _parse_size(value: Optional[str]) -> int:
    """Parse a decimal byte count, falling back to 0."""
    if value is None:
        return 0
    value = value.strip()
    if not value.isdecimal():
        return 0
    return int(value)


@dataclass
class FileMetadata:
    """
    User metadata stored alongside each object.

    All four entries are always written, even when empty, so that an
    object read back with no metadata at all can be told apart from an
    object whose fields happen to be blank.

    Attributes:
        mime_type: MIME type of the content
        size: Size in bytes
        title: Original file name or title
        origin: Name of the storage adapter that wrote the object
    """

    mime_type: str = ""
    size: int = 0
    title: str = ""
    origin: str = ""

    def to_s3_metadata(self) -> Dict[str, str]:
        """Encode as the flat string mapping sent with ``put_object``."""
        return {
            METADATA_MIME_TYPE: self.mime_type or "",
            METADATA_SIZE: str(max(self.size or 0, 0)),
            METADATA_TITLE: self.title or "",
            METADATA_ORIGIN: self.origin or "",
        }

    @classmethod
    def decode(cls, metadata: Optional[Mapping[str, str]]) -> Optional["FileMetadata"]:
        """
        Decode the metadata returned by ``head_object``.

        S3 lower-cases user metadata keys on the way back, so keys are
        matched case-insensitively.

        Args:
            metadata: Raw user metadata mapping

        Returns:
            Decoded metadata, or None if the mapping is empty (object absent)
        """
        if not metadata:
            return None

        normalized = {str(k).lower(): v for k, v in metadata.items()}
        return cls(
            mime_type=normalized.get(METADATA_MIME_TYPE.lower(), "") or "",
            size=_parse_size(normalized.get(METADATA_SIZE.lower())),
            title=normalized.get(METADATA_TITLE.lower(), "") or "",
            origin=normalized.get(METADATA_ORIGIN.lower(), "") or "",
        )


@dataclass
class StoredFile:
    """
    A file held by the object store.

    ``content`` is only populated by a full fetch; metadata-only lookups
    leave it as None.

    Attributes:
        key: Storage key (object name inside the bucket)
        mime_type: MIME type
        size: Size in bytes
        title: File title
        origin: Name of the adapter that wrote it
        content: Raw bytes, when fetched
    """

    key: str
    mime_type: str = DEFAULT_MIME_TYPE
    size: int = 0
    title: str = ""
    origin: str = ""
    content: Optional[bytes] = field(default=None, repr=False)

    @classmethod
    def from_metadata(
        cls, key: str, metadata: FileMetadata, content: Optional[bytes] = None
    ) -> "StoredFile":
        """Build a StoredFile from decoded object metadata."""
        return cls(
            key=key,
            mime_type=metadata.mime_type,
            size=metadata.size,
            title=metadata.title,
            origin=metadata.origin,
            content=content,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary (content excluded)."""
        return {
            "key": self.key,
            "mime_type": self.mime_type,
            "size": self.size,
            "title": self.title,
            "origin": self.origin,
        }
