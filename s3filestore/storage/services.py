"""Host services consumed by the storage adapter.

The adapter does not sign download URLs or decide who may read a file; it
delegates both to the host through the interfaces below.
"""

from typing import Any, Dict, Optional, Protocol, runtime_checkable

# Request data entry holding the storage key of the requested file
PARAMETER_FILE_ID = "file_id"


@runtime_checkable
class FileDownloadUrlService(Protocol):
    """Builds and validates browser-facing download URLs.

    ``_fo`` methods serve the front office (public site), ``_bo`` methods
    the back office (administration).
    """

    def get_file_download_url_fo(
        self,
        key: str,
        additional_data: Optional[Dict[str, str]],
        provider_name: str,
    ) -> str: ...

    def get_file_download_url_bo(
        self,
        key: str,
        additional_data: Optional[Dict[str, str]],
        provider_name: str,
    ) -> str: ...

    def get_request_data_fo(self, request: Any) -> Dict[str, str]: ...

    def get_request_data_bo(self, request: Any) -> Dict[str, str]: ...

    def check_link_validity(self, file_data: Dict[str, str]) -> None:
        """Raise ExpiredLinkError if the link behind ``file_data`` expired."""
        ...


@runtime_checkable
class FileRBACService(Protocol):
    """Decides whether a user may read a file."""

    def check_access_rights(self, file_data: Dict[str, str], user: Any) -> None:
        """Raise AccessDeniedError if ``user`` may not read the file."""
        ...
