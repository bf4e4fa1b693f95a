"""Shared test fixtures and utilities."""

from typing import List, Optional
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError

from gitbin.models import StoreConfiguration
from gitbin.storage.s3 import S3BlobStore


class FakeBody:
    """Response body returning scripted chunks, then b"" forever.

    An exception in the script is raised from read() instead of returned.
    """

    def __init__(self, chunks: List[bytes]):
        self._chunks = list(chunks)
        self.closed = False

    def read(self, amt: Optional[int] = None) -> bytes:
        if not self._chunks:
            return b""
        chunk = self._chunks.pop(0)
        if isinstance(chunk, Exception):
            raise chunk
        return chunk

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def client_error():
    """Factory for botocore ClientErrors with a given S3 error code."""
    def _make(code: str, message: str = "error", operation: str = "GetObject") -> ClientError:
        return ClientError({"Error": {"Code": code, "Message": message}}, operation)
    return _make


@pytest.fixture
def make_response():
    """Factory for get_object responses whose body yields the given chunks.

    The declared length defaults to the total of the chunks; pass a larger
    length to simulate a stream that ends early.
    """
    def _make(chunks: List[bytes], length: Optional[int] = None) -> dict:
        if length is None:
            length = sum(len(c) for c in chunks)
        return {"ContentLength": length, "Body": FakeBody(chunks)}
    return _make


@pytest.fixture
def store_config():
    """S3 configuration with dummy credentials."""
    return StoreConfiguration(
        bucket="test-bucket",
        region="us-east-1",
        access_key="AKIATEST",
        secret_key="secret",
    )


@pytest.fixture
def fake_client():
    """Stand-in for the boto3 S3 client."""
    return MagicMock()


@pytest.fixture
def s3_store(store_config, fake_client):
    """S3BlobStore whose boto3 client is the fake_client mock."""
    with patch("gitbin.storage.s3.boto3.client", return_value=fake_client):
        yield S3BlobStore(store_config)


@pytest.fixture
def progress_log():
    """Callback that records every reported percentage in .calls."""
    calls = []

    def _record(percent: int) -> None:
        calls.append(percent)

    _record.calls = calls
    return _record


@pytest.fixture
def write_file(tmp_path):
    """Factory fixture to write binary files relative to tmp_path."""
    def _write(path: str, content: bytes = b"test content"):
        file_path = tmp_path / path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_bytes(content)
        return file_path
    return _write
