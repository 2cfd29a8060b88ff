"""Configuration management for the S3 file store.

This module provides centralized configuration management using pydantic-settings.
All configuration is loaded from environment variables or .env files.

Every setting is a plain string and the empty string means "unset, use the
default". Flags are only true for the exact literal ``"true"``.
"""

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from s3filestore.util.path_template import DEFAULT_PATTERN
from s3filestore.util.pattern import split_patterns

DEFAULT_REGION = "us-east-1"
DEFAULT_CHECKSUM_ALGORITHM = "CRC32"
CHECKSUM_ALGORITHMS = ("CRC32", "CRC32C", "SHA1", "SHA256", "CRC64NVME")
LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


def parse_flag(value: Optional[str]) -> bool:
    """Parse a boolean flag: only the exact string "true" is true."""
    return value == "true"


class ConnectionProfile(BaseModel):
    """Immutable connection parameters used to build the S3 client.

    Attributes:
        endpoint_url: Custom endpoint (MinIO, Ceph, ...); None for AWS
        bucket: Bucket holding the files
        access_key: Static access key ("" to use the SDK credential chain)
        secret_key: Static secret key
        region: Signing region
        checksum_algorithm: Checksum algorithm sent on uploads
        force_path_style: Use path-style addressing (bucket in the path)
        proxy_host: HTTP proxy URL or host:port
        proxy_username: Proxy user
        proxy_password: Proxy password
        no_proxy_for: Host patterns that bypass the proxy
        request_timeout: Per-attempt read timeout in seconds (0 = SDK default)
        connection_timeout: Connect timeout in seconds (0 = SDK default)
    """

    model_config = ConfigDict(frozen=True)

    endpoint_url: Optional[str] = None
    bucket: str = ""
    access_key: str = ""
    secret_key: str = Field(default="", repr=False)
    region: str = DEFAULT_REGION
    checksum_algorithm: str = DEFAULT_CHECKSUM_ALGORITHM
    force_path_style: bool = True
    proxy_host: str = ""
    proxy_username: str = ""
    proxy_password: str = Field(default="", repr=False)
    no_proxy_for: Tuple[str, ...] = ()
    request_timeout: int = Field(default=0, ge=0)
    connection_timeout: int = Field(default=0, ge=0)


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Attributes:
        # S3 connection (14 fields)
        s3_url: Endpoint URL of the S3-compatible server
        s3_bucket: Bucket name
        s3_key: Access key
        s3_password: Secret key
        s3_default_file_path: Key template for new objects
        s3_force_path_style: "true" for path-style addressing (default when empty)
        s3_region: Signing region
        s3_checksum_algorithm: Upload checksum algorithm
        s3_proxy_host: HTTP proxy
        s3_proxy_username: Proxy user
        s3_proxy_password: Proxy password
        s3_no_proxy_for: Comma-separated host patterns bypassing the proxy
        s3_request_timeout: Per-attempt timeout in seconds
        s3_connection_timeout: Connect timeout in seconds

        # Adapter identity (3 fields)
        site_code: Value substituted for {code} in key templates
        storage_name: Name of the adapter (written as object origin)
        storage_default: "true" if this adapter is the default backend

        # Application (1 field)
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # S3 connection (14 fields)
    s3_url: str = Field(default="", description="Endpoint URL of the S3-compatible server")
    s3_bucket: str = Field(default="", description="Bucket name")
    s3_key: str = Field(default="", description="Access key")
    s3_password: str = Field(default="", description="Secret key")
    s3_default_file_path: str = Field(default="", description="Key template for new objects")
    s3_force_path_style: str = Field(default="", description="Path-style addressing flag")
    s3_region: str = Field(default="", description="Signing region")
    s3_checksum_algorithm: str = Field(default="", description="Upload checksum algorithm")
    s3_proxy_host: str = Field(default="", description="HTTP proxy")
    s3_proxy_username: str = Field(default="", description="Proxy user")
    s3_proxy_password: str = Field(default="", description="Proxy password")
    s3_no_proxy_for: str = Field(default="", description="Hosts bypassing the proxy")
    s3_request_timeout: str = Field(default="", description="Per-attempt timeout (seconds)")
    s3_connection_timeout: str = Field(default="", description="Connect timeout (seconds)")

    # Adapter identity (3 fields)
    site_code: str = Field(default="", description="Site code for {code} placeholders")
    storage_name: str = Field(default="s3", description="Adapter name")
    storage_default: str = Field(default="", description="Default adapter flag")

    # Application (1 field)
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("s3_request_timeout", "s3_connection_timeout")
    @classmethod
    def validate_timeout(cls, v: str) -> str:
        """Validate that a timeout is empty or a non-negative integer.

        Args:
            v: The timeout value

        Returns:
            The stripped value

        Raises:
            ValueError: If the value is not a whole number of seconds
        """
        v = v.strip()
        if v and not v.isdecimal():
            raise ValueError("timeout must be a non-negative whole number of seconds")
        return v

    @field_validator("s3_checksum_algorithm")
    @classmethod
    def validate_checksum_algorithm(cls, v: str) -> str:
        """Validate and normalize the checksum algorithm name."""
        v = v.strip().upper()
        if v and v not in CHECKSUM_ALGORITHMS:
            raise ValueError(
                f"unsupported checksum algorithm: {v}. "
                f"Supported: {', '.join(CHECKSUM_ALGORITHMS)}"
            )
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize the logging level name."""
        v = v.strip().upper()
        if v not in LOG_LEVELS:
            raise ValueError(f"invalid log level: {v}. Must be one of: {', '.join(LOG_LEVELS)}")
        return v

    @property
    def default_file_path(self) -> str:
        return self.s3_default_file_path or DEFAULT_PATTERN

    @property
    def is_default_storage(self) -> bool:
        return parse_flag(self.storage_default)

    def to_profile(self) -> ConnectionProfile:
        """Build the immutable connection profile from these settings."""
        return ConnectionProfile(
            endpoint_url=self.s3_url or None,
            bucket=self.s3_bucket,
            access_key=self.s3_key,
            secret_key=self.s3_password,
            region=self.s3_region or DEFAULT_REGION,
            checksum_algorithm=self.s3_checksum_algorithm or DEFAULT_CHECKSUM_ALGORITHM,
            force_path_style=(
                True if self.s3_force_path_style == "" else parse_flag(self.s3_force_path_style)
            ),
            proxy_host=self.s3_proxy_host,
            proxy_username=self.s3_proxy_username,
            proxy_password=self.s3_proxy_password,
            no_proxy_for=tuple(split_patterns(self.s3_no_proxy_for)),
            request_timeout=int(self.s3_request_timeout or 0),
            connection_timeout=int(self.s3_connection_timeout or 0),
        )
