"""S3-compatible file store adapter.

This module provides the S3StorageAdapter class, the facade the host uses to
store, fetch and delete files in an S3-compatible bucket (AWS S3, MinIO, ...).

Key features:
- Lazily built, per-adapter boto3 client
- Keys generated from a path template ({YYYY}/{MM}/{UUID}...)
- Four metadata entries (mimeType, size, title, origin) on every object
- Every SDK failure translated into a StorageError subclass
- Download URLs and access checks delegated to host services
"""

import io
from typing import Any, BinaryIO, Dict, List, Optional, Union

from botocore.exceptions import BotoCoreError, ClientError
from loguru import logger

from s3filestore.core.config import ConnectionProfile, Settings
from s3filestore.core.models import DEFAULT_MIME_TYPE, FileMetadata, StoredFile
from s3filestore.storage.client_factory import ClientFactory
from s3filestore.storage.errors import ObjectNotFoundError, StorageError, to_storage_error
from s3filestore.storage.services import (
    PARAMETER_FILE_ID,
    FileDownloadUrlService,
    FileRBACService,
)
from s3filestore.util.path_template import DEFAULT_PATTERN, resolve

# Errors translated at the boundary of every operation
STORE_ERRORS = (BotoCoreError, ClientError, OSError)

Content = Union[bytes, bytearray, BinaryIO]


def _is_blank(key: Optional[str]) -> bool:
    return key is None or not key.strip()


class S3StorageAdapter:
    """File store backed by one bucket of an S3-compatible server.

    Each adapter owns its own client; nothing is shared between instances.
    Operations block until the store answers or the configured timeout
    expires, and are never retried by the adapter itself.

    Attributes:
        profile: Connection profile
        name: Adapter name, written as the ``origin`` of stored objects
        default_file_path: Key template used for new objects
        site_code: Value substituted for ``{code}`` in the key template
        download_url_service: Host service building download URLs
        rbac_service: Host service checking read access (optional)
    """

    def __init__(
        self,
        profile: ConnectionProfile,
        name: str = "s3",
        default: bool = False,
        default_file_path: str = DEFAULT_PATTERN,
        site_code: str = "",
        download_url_service: Optional[FileDownloadUrlService] = None,
        rbac_service: Optional[FileRBACService] = None,
    ) -> None:
        """Initialize the adapter. No connection is made until first use.

        Args:
            profile: Connection profile for the client
            name: Adapter name
            default: Whether this adapter is the host's default file store
            default_file_path: Key template for new objects
            site_code: Site code for ``{code}`` placeholders
            download_url_service: Host download URL service
            rbac_service: Host access-rights service
        """
        self.profile = profile
        self.name = name
        self._default = default
        self.default_file_path = default_file_path or DEFAULT_PATTERN
        self.site_code = site_code
        self.download_url_service = download_url_service
        self.rbac_service = rbac_service
        self._client_factory = ClientFactory(profile)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        download_url_service: Optional[FileDownloadUrlService] = None,
        rbac_service: Optional[FileRBACService] = None,
    ) -> "S3StorageAdapter":
        """Create an adapter from application settings."""
        return cls(
            profile=settings.to_profile(),
            name=settings.storage_name,
            default=settings.is_default_storage,
            default_file_path=settings.default_file_path,
            site_code=settings.site_code,
            download_url_service=download_url_service,
            rbac_service=rbac_service,
        )

    @property
    def bucket(self) -> str:
        return self.profile.bucket

    @property
    def client_factory(self) -> ClientFactory:
        return self._client_factory

    # Identity

    def get_name(self) -> str:
        return self.name

    def set_name(self, name: str) -> None:
        self.name = name

    def is_default(self) -> bool:
        return self._default

    def set_default(self, default: bool) -> None:
        self._default = default

    # Store

    def store_bytes(self, data: bytes) -> str:
        """Store raw bytes under a newly generated key.

        Args:
            data: File content

        Returns:
            Storage key of the new object
        """
        return self._store(data, title="", size=None, mime_type=DEFAULT_MIME_TYPE)

    def store_stream(self, stream: BinaryIO) -> str:
        """Store the full content of a binary stream under a new key.

        Raises:
            TransportNotFoundError: If the stream cannot be read
        """
        return self._store(stream, title="", size=None, mime_type=DEFAULT_MIME_TYPE)

    def store_named_file(
        self,
        name: str,
        size: Optional[int],
        mime_type: Optional[str],
        content: Content,
    ) -> str:
        """Store an uploaded file, keeping its name and MIME type as metadata.

        Args:
            name: Original file name, stored as the title
            size: Size in bytes (None to use the content length)
            mime_type: MIME type (generic binary if empty)
            content: Bytes or binary stream

        Returns:
            Storage key of the new object
        """
        return self._store(content, title=name, size=size, mime_type=mime_type)

    def store_file(self, stored_file: StoredFile) -> str:
        """Store a StoredFile (its key is ignored, a new one is generated)."""
        return self._store(
            stored_file.content or b"",
            title=stored_file.title,
            size=stored_file.size,
            mime_type=stored_file.mime_type,
        )

    def _store(
        self,
        content: Content,
        title: str,
        size: Optional[int],
        mime_type: Optional[str],
    ) -> str:
        key = resolve(self.default_file_path, self.site_code)
        client = self._client_factory.get_client()

        try:
            body = self._read_content(content)
            metadata = FileMetadata(
                mime_type=mime_type or DEFAULT_MIME_TYPE,
                size=len(body) if size is None or size < 0 else size,
                title=title or "",
                origin=self.name,
            )
            client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=body,
                ContentType=metadata.mime_type,
                Metadata=metadata.to_s3_metadata(),
                ChecksumAlgorithm=self.profile.checksum_algorithm,
            )
        except STORE_ERRORS as e:
            raise self._fail("Failed to store file", e, key) from e

        logger.info(f"Stored file: key={key}, size={metadata.size}, mime_type={metadata.mime_type}")
        return key

    @staticmethod
    def _read_content(content: Optional[Content]) -> bytes:
        if content is None:
            return b""
        if isinstance(content, (bytes, bytearray)):
            return bytes(content)
        return content.read()

    # Read

    def fetch(self, key: Optional[str], with_content: bool = True) -> Optional[StoredFile]:
        """Look up a file by key.

        Args:
            key: Storage key
            with_content: Also download the object bytes

        Returns:
            The file, or None if the key is blank or the object carries no metadata

        Raises:
            StorageError: If the store reports an error (404 included)
        """
        if _is_blank(key):
            logger.debug("Cannot load file, key is empty")
            return None

        client = self._client_factory.get_client()
        try:
            head = client.head_object(Bucket=self.bucket, Key=key, ChecksumMode="ENABLED")
            metadata = FileMetadata.decode(head.get("Metadata"))
            if metadata is None:
                return None

            content = None
            if with_content:
                response = client.get_object(Bucket=self.bucket, Key=key, ChecksumMode="ENABLED")
                try:
                    content = response["Body"].read()
                finally:
                    response["Body"].close()
        except STORE_ERRORS as e:
            raise self._fail("Failed to load file", e, key) from e

        return StoredFile.from_metadata(key, metadata, content)

    def get_file(self, key: Optional[str]) -> Optional[StoredFile]:
        return self.fetch(key, with_content=True)

    def get_file_metadata(self, key: Optional[str]) -> Optional[StoredFile]:
        return self.fetch(key, with_content=False)

    def get_input_stream(self, key: str) -> BinaryIO:
        """Return the content of a file as an in-memory binary stream.

        Raises:
            ObjectNotFoundError: If no file exists under ``key``
        """
        stored_file = self.get_file(key)
        if stored_file is None:
            raise ObjectNotFoundError(key=key)
        return io.BytesIO(stored_file.content or b"")

    def list_keys(self, prefix: str = "", limit: int = 1000) -> List[str]:
        """List object keys under ``prefix`` (at most ``limit``, capped at 1000)."""
        client = self._client_factory.get_client()
        try:
            response = client.list_objects_v2(
                Bucket=self.bucket,
                Prefix=prefix,
                MaxKeys=max(1, min(limit, 1000)),
            )
        except STORE_ERRORS as e:
            raise self._fail("Failed to list files", e, prefix) from e

        return [item["Key"] for item in response.get("Contents", [])]

    # Delete

    def delete(self, key: Optional[str]) -> None:
        """Delete a file. Blank keys and missing objects are not errors."""
        if _is_blank(key):
            logger.debug("Cannot delete file, key is empty")
            return

        client = self._client_factory.get_client()
        try:
            client.delete_object(Bucket=self.bucket, Key=key)
        except STORE_ERRORS as e:
            raise self._fail("Failed to delete file", e, key) from e

        logger.debug(f"Deleted file: key={key}")

    # Health

    def health_check(self) -> bool:
        """Check that the store is reachable with the configured profile.

        Returns:
            bool: True if a minimal listing succeeds, False otherwise
        """
        try:
            client = self._client_factory.get_client()
            client.list_objects_v2(Bucket=self.bucket, MaxKeys=1)
            return True
        except Exception as e:
            error = to_storage_error(e, self.bucket) if isinstance(e, STORE_ERRORS) else e
            logger.warning(f"S3 health check failed for {self.name}: {error}")
            self._log_sdk_details(e)
            return False

    # Download URLs and access control

    def get_file_download_url_fo(
        self, key: str, additional_data: Optional[Dict[str, str]] = None
    ) -> str:
        return self._require_download_url_service().get_file_download_url_fo(
            key, additional_data, self.name
        )

    def get_file_download_url_bo(
        self, key: str, additional_data: Optional[Dict[str, str]] = None
    ) -> str:
        return self._require_download_url_service().get_file_download_url_bo(
            key, additional_data, self.name
        )

    def check_access_rights(self, file_data: Dict[str, str], user: Any) -> None:
        """Delegate to the access-rights service; everyone may read without one."""
        if self.rbac_service is not None:
            self.rbac_service.check_access_rights(file_data, user)

    def check_link_validity(self, file_data: Dict[str, str]) -> None:
        self._require_download_url_service().check_link_validity(file_data)

    def get_file_from_request_fo(self, request: Any, user: Any = None) -> Optional[StoredFile]:
        """Serve a front-office download request.

        Checks access rights and link validity before loading the file.

        Raises:
            AccessDeniedError: If the user may not read the file
            ExpiredLinkError: If the download link expired
        """
        service = self._require_download_url_service()
        file_data = service.get_request_data_fo(request)

        self.check_access_rights(file_data, user)
        self.check_link_validity(file_data)

        return self.get_file(file_data.get(PARAMETER_FILE_ID))

    def get_file_from_request_bo(self, request: Any) -> Optional[StoredFile]:
        """Serve a back-office download request."""
        file_data = self._require_download_url_service().get_request_data_bo(request)
        return self.get_file(file_data.get(PARAMETER_FILE_ID))

    def _require_download_url_service(self) -> FileDownloadUrlService:
        if self.download_url_service is None:
            raise RuntimeError(f"No download URL service configured for storage {self.name}")
        return self.download_url_service

    # Errors

    def _fail(self, message: str, error: BaseException, key: Optional[str]) -> StorageError:
        storage_error = to_storage_error(error, key)
        logger.error(
            f"{message} {key}: {storage_error.kind.value} (status={storage_error.status_code})"
        )
        self._log_sdk_details(error)
        return storage_error

    @staticmethod
    def _log_sdk_details(error: BaseException) -> None:
        if str(error):
            logger.debug(f"Message: {error}")
        if error.__cause__ is not None:
            logger.debug(f"Cause: {error.__cause__}")
