"""Shared fixtures for the S3 file store tests.

The boto3 client is replaced by FakeS3Client, an in-memory bucket that
mimics the parts of the S3 API the adapter uses (including lower-cased
user metadata keys and 404 ClientErrors on missing objects).
"""

import io
from typing import Any, Callable, Dict, Generator, List
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError

from s3filestore.core.config import ConnectionProfile
from s3filestore.storage.adapter import S3StorageAdapter

BOTO3_SESSION = "s3filestore.storage.client_factory.boto3.session.Session"


def make_client_error(status: int, operation: str = "HeadObject", code: str = "") -> ClientError:
    """Build a ClientError as botocore raises it for an HTTP error status."""
    return ClientError(
        {
            "Error": {"Code": code or str(status), "Message": f"HTTP {status}"},
            "ResponseMetadata": {"HTTPStatusCode": status},
        },
        operation,
    )


class FakeS3Client:
    """In-memory stand-in for a boto3 S3 client."""

    def __init__(self) -> None:
        self.objects: Dict[str, Dict[str, Any]] = {}
        self.put_calls: List[Dict[str, Any]] = []

    def put_object(self, Bucket: str, Key: str, Body: bytes, Metadata=None, **kwargs) -> Dict[str, Any]:
        self.put_calls.append({"Bucket": Bucket, "Key": Key, "Metadata": Metadata, **kwargs})
        self.objects[Key] = {
            "body": bytes(Body),
            # S3 returns user metadata keys lower-cased
            "metadata": {k.lower(): v for k, v in (Metadata or {}).items()},
            "content_type": kwargs.get("ContentType"),
        }
        return {"ETag": '"fake-etag"'}

    def head_object(self, Bucket: str, Key: str, **kwargs) -> Dict[str, Any]:
        if Key not in self.objects:
            raise make_client_error(404, "HeadObject")
        stored = self.objects[Key]
        return {
            "ContentLength": len(stored["body"]),
            "ContentType": stored["content_type"],
            "Metadata": dict(stored["metadata"]),
        }

    def get_object(self, Bucket: str, Key: str, **kwargs) -> Dict[str, Any]:
        if Key not in self.objects:
            raise make_client_error(404, "GetObject", code="NoSuchKey")
        return {"Body": io.BytesIO(self.objects[Key]["body"])}

    def delete_object(self, Bucket: str, Key: str, **kwargs) -> Dict[str, Any]:
        self.objects.pop(Key, None)
        return {}

    def list_objects_v2(self, Bucket: str, Prefix: str = "", MaxKeys: int = 1000, **kwargs) -> Dict[str, Any]:
        keys = sorted(k for k in self.objects if k.startswith(Prefix))[:MaxKeys]
        return {"KeyCount": len(keys), "Contents": [{"Key": k} for k in keys]}


@pytest.fixture
def client_error() -> Callable[..., ClientError]:
    """Factory for botocore ClientErrors with a given HTTP status."""
    return make_client_error


@pytest.fixture
def fake_s3() -> FakeS3Client:
    return FakeS3Client()


@pytest.fixture
def profile() -> ConnectionProfile:
    """Connection profile pointing at a local MinIO."""
    return ConnectionProfile(
        endpoint_url="http://localhost:9000",
        bucket="test-bucket",
        access_key="minioadmin",
        secret_key="minioadmin123",
    )


@pytest.fixture
def mock_boto3_client(fake_s3: FakeS3Client) -> Generator[MagicMock, None, None]:
    """Patch the boto3 Session so every adapter gets the fake bucket.

    Yields:
        The mocked Session.client method
    """
    with patch(BOTO3_SESSION) as mock_session:
        mock_session.return_value.client.return_value = fake_s3
        yield mock_session.return_value.client


@pytest.fixture
def adapter(profile: ConnectionProfile, mock_boto3_client: MagicMock) -> S3StorageAdapter:
    """Adapter backed by the fake bucket."""
    return S3StorageAdapter(
        profile,
        name="s3test",
        default_file_path="{YYYY}/{MM}/{UUID}",
        site_code="paris",
    )
