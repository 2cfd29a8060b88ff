"""Storage package for S3-compatible object storage.

This package provides the storage adapter, its lazily-built boto3 client and
the error taxonomy raised by every storage operation.
"""

from s3filestore.storage.adapter import S3StorageAdapter
from s3filestore.storage.client_factory import ClientFactory
from s3filestore.storage.errors import (
    AccessDeniedError,
    BadConfigurationError,
    BadRequestError,
    ErrorKind,
    ExpiredLinkError,
    ForbiddenError,
    ObjectNotFoundError,
    ServerError,
    ServiceUnavailableError,
    StorageError,
    StoreTimeoutError,
    TransportNotFoundError,
    UnauthorizedError,
    UnclassifiedStoreError,
    classify,
)
from s3filestore.storage.registry import StorageRegistry

__all__ = [
    "S3StorageAdapter",
    "ClientFactory",
    "StorageRegistry",
    "ErrorKind",
    "classify",
    "StorageError",
    "BadRequestError",
    "BadConfigurationError",
    "UnauthorizedError",
    "ForbiddenError",
    "ObjectNotFoundError",
    "TransportNotFoundError",
    "StoreTimeoutError",
    "ServerError",
    "ServiceUnavailableError",
    "UnclassifiedStoreError",
    "AccessDeniedError",
    "ExpiredLinkError",
]
