"""Error taxonomy for the S3 file store.

Every failure coming out of boto3/botocore is translated, at the boundary of
each public adapter operation, into one exception of the hierarchy below.
Callers therefore only ever see :class:`StorageError` subclasses, each
carrying the HTTP-like status code and the key that triggered it.

Status mapping:
    400 -> BAD_REQUEST          malformed endpoint, invalid key
    401 -> UNAUTHORIZED         bad credentials
    403 -> FORBIDDEN            missing permission
    404 -> NOT_FOUND            object missing, or stream I/O failure
    408 -> TIMEOUT              connect/read timeout
    500 -> SERVER_ERROR         store internal error
    503 -> SERVICE_UNAVAILABLE  store unreachable
    any other -> UNCLASSIFIED   carries the numeric code
"""

from enum import Enum
from typing import Dict, Optional, Type

from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectTimeoutError,
    ParamValidationError,
    ReadTimeoutError,
)


class ErrorKind(str, Enum):
    """Classified failure kinds."""

    BAD_REQUEST = "bad_request"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    TIMEOUT = "timeout"
    SERVER_ERROR = "server_error"
    SERVICE_UNAVAILABLE = "service_unavailable"
    UNCLASSIFIED = "unclassified"


STATUS_KINDS: Dict[int, ErrorKind] = {
    400: ErrorKind.BAD_REQUEST,
    401: ErrorKind.UNAUTHORIZED,
    403: ErrorKind.FORBIDDEN,
    404: ErrorKind.NOT_FOUND,
    408: ErrorKind.TIMEOUT,
    500: ErrorKind.SERVER_ERROR,
    503: ErrorKind.SERVICE_UNAVAILABLE,
}

MESSAGE_KEYS: Dict[ErrorKind, str] = {
    ErrorKind.BAD_REQUEST: "s3filestore.errormessage.400.badrequest",
    ErrorKind.UNAUTHORIZED: "s3filestore.errormessage.401.unauthorized",
    ErrorKind.FORBIDDEN: "s3filestore.errormessage.403.forbidden",
    ErrorKind.NOT_FOUND: "s3filestore.errormessage.404.filenotfound",
    ErrorKind.TIMEOUT: "s3filestore.errormessage.408.timeout",
    ErrorKind.SERVER_ERROR: "s3filestore.errormessage.500.internalservererror",
    ErrorKind.SERVICE_UNAVAILABLE: "s3filestore.errormessage.503.serviceunavailable",
}


class StorageError(Exception):
    """Base exception for storage operations.

    Attributes:
        kind: Classified failure kind
        status_code: HTTP-like status code
        key: Storage key involved, if any
        message_key: Message identifier for the host's i18n layer
    """

    kind = ErrorKind.UNCLASSIFIED
    default_status = 0

    def __init__(
        self,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
        key: Optional[str] = None,
    ) -> None:
        self.status_code = status_code if status_code is not None else self.default_status
        self.key = key
        self.message_key = MESSAGE_KEYS.get(self.kind, f"Error {self.status_code}")
        super().__init__(message or self.message_key)

    def __str__(self) -> str:
        text = super().__str__()
        if self.key:
            return f"{text} (key={self.key})"
        return text


class BadRequestError(StorageError):
    kind = ErrorKind.BAD_REQUEST
    default_status = 400


class BadConfigurationError(BadRequestError):
    """The connection profile cannot produce a client (operator error)."""


class UnauthorizedError(StorageError):
    kind = ErrorKind.UNAUTHORIZED
    default_status = 401


class ForbiddenError(StorageError):
    kind = ErrorKind.FORBIDDEN
    default_status = 403


class ObjectNotFoundError(StorageError):
    kind = ErrorKind.NOT_FOUND
    default_status = 404


class TransportNotFoundError(ObjectNotFoundError):
    """Low-level I/O failure while reading a stream."""


class StoreTimeoutError(StorageError):
    kind = ErrorKind.TIMEOUT
    default_status = 408


class ServerError(StorageError):
    kind = ErrorKind.SERVER_ERROR
    default_status = 500


class ServiceUnavailableError(StorageError):
    kind = ErrorKind.SERVICE_UNAVAILABLE
    default_status = 503


class UnclassifiedStoreError(StorageError):
    kind = ErrorKind.UNCLASSIFIED


ERROR_CLASSES: Dict[ErrorKind, Type[StorageError]] = {
    ErrorKind.BAD_REQUEST: BadRequestError,
    ErrorKind.UNAUTHORIZED: UnauthorizedError,
    ErrorKind.FORBIDDEN: ForbiddenError,
    ErrorKind.NOT_FOUND: ObjectNotFoundError,
    ErrorKind.TIMEOUT: StoreTimeoutError,
    ErrorKind.SERVER_ERROR: ServerError,
    ErrorKind.SERVICE_UNAVAILABLE: ServiceUnavailableError,
    ErrorKind.UNCLASSIFIED: UnclassifiedStoreError,
}


class AccessDeniedError(Exception):
    """Raised by the access-rights service when a caller may not read a file."""


class ExpiredLinkError(Exception):
    """Raised by the download-URL service when a download link has expired."""


def kind_for_status(status_code: int) -> ErrorKind:
    """Map an HTTP status code to an error kind."""
    return STATUS_KINDS.get(status_code, ErrorKind.UNCLASSIFIED)


def _client_error_status(error: ClientError) -> int:
    response = error.response or {}
    status = response.get("ResponseMetadata", {}).get("HTTPStatusCode")
    if status:
        return int(status)
    # head_object errors only carry the status as the error code
    code = str(response.get("Error", {}).get("Code", ""))
    if code.isdigit():
        return int(code)
    return 500


def status_code_of(error: BaseException) -> int:
    """Return the HTTP-like status code describing ``error``."""
    if isinstance(error, StorageError):
        return error.status_code
    if isinstance(error, ClientError):
        return _client_error_status(error)
    if isinstance(error, (ConnectTimeoutError, ReadTimeoutError)):
        return 408
    if isinstance(error, ParamValidationError):
        return 400
    if isinstance(error, BotoCoreError):
        return 503
    if isinstance(error, OSError):
        return 404
    if isinstance(error, ValueError):
        return 400
    return 500


def classify(error: BaseException) -> ErrorKind:
    """Classify a raw boto3/botocore/IO error into an :class:`ErrorKind`."""
    if isinstance(error, StorageError):
        return error.kind
    return kind_for_status(status_code_of(error))


def to_storage_error(error: BaseException, key: Optional[str] = None) -> StorageError:
    """Translate ``error`` into the matching :class:`StorageError`.

    The original exception is chained as ``__cause__``. Storage errors are
    returned unchanged.

    Args:
        error: Raw exception raised by the SDK or while reading a stream
        key: Storage key involved in the failing operation

    Returns:
        Classified storage error, ready to be raised
    """
    if isinstance(error, StorageError):
        return error

    status_code = status_code_of(error)
    kind = kind_for_status(status_code)
    if kind is ErrorKind.NOT_FOUND and isinstance(error, OSError):
        error_class: Type[StorageError] = TransportNotFoundError
    else:
        error_class = ERROR_CLASSES[kind]

    message = MESSAGE_KEYS.get(kind, f"Error {status_code}")
    storage_error = error_class(message, status_code=status_code, key=key)
    storage_error.__cause__ = error
    return storage_error
