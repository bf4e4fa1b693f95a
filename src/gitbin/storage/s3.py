"""S3 blob storage implementation."""

import logging
import threading
from contextlib import closing
from pathlib import Path
from typing import Any, BinaryIO, Dict, List, Optional, Union

import boto3
from botocore.config import Config
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    IncompleteReadError,
    NoCredentialsError,
    ReadTimeoutError,
    ResponseStreamingError,
)

from ..constants import (
    AUTH_ERROR_CODES,
    DIGEST_ERROR_CODES,
    DOWNLOAD_ATTEMPTS,
    DOWNLOAD_CHUNK_SIZE,
    LIST_PAGE_SIZE,
    NOT_FOUND_ERROR_CODES,
)
from ..errors import (
    AuthError,
    GitBinError,
    IntegrityError,
    NotFoundError,
    RemoteProtocolError,
    TransientStreamError,
)
from ..hashing import compute_md5_base64
from ..models import BlobDescriptor, ProgressCallback, StoreConfiguration
from ..retry import retry_call
from ..utils import MonotonicProgress, percent_of

logger = logging.getLogger(__name__)

# Faults raised while reading a response body that mean the stream dropped
STREAM_FAULTS = (IncompleteReadError, ResponseStreamingError, ReadTimeoutError)


def _error_code(e: ClientError) -> Optional[str]:
    return e.response.get("Error", {}).get("Code")


def _error_message(e: ClientError) -> Optional[str]:
    return e.response.get("Error", {}).get("Message")


class _ProgressReader:
    """File wrapper that reports how far the upload has read."""

    def __init__(self, fileobj: BinaryIO, total: int, progress: MonotonicProgress):
        self._fileobj = fileobj
        self._total = total
        self._progress = progress

    def read(self, size: int = -1) -> bytes:
        data = self._fileobj.read(size)
        if self._total > 0:
            self._progress(percent_of(self._fileobj.tell(), self._total))
        return data

    def seek(self, offset: int, whence: int = 0) -> int:
        return self._fileobj.seek(offset, whence)

    def tell(self) -> int:
        return self._fileobj.tell()


class S3BlobStore:
    """
    Amazon S3 (or S3-compatible) blob store.

    Blobs are stored under their key as given; the store does no sharding
    or renaming. The boto3 client is created on first use and reused for
    the lifetime of the store.
    """

    def __init__(self, config: StoreConfiguration):
        """
        Initialize S3 blob store.

        No network traffic happens here.

        Args:
            config: Connection settings (region, transport, credentials, bucket)
        """
        self.config = config
        self.bucket = config.bucket
        self._client = None
        self._client_lock = threading.Lock()

    # ============= Connection =============

    def get_connection(self) -> Any:
        """Return the cached boto3 client, creating it on first call."""
        if self._client is None:
            with self._client_lock:
                if self._client is None:
                    self._client = self._create_client()
        return self._client

    def _create_client(self) -> Any:
        timeout = self.config.request_timeout
        return boto3.client(
            "s3",
            region_name=self.config.region,
            endpoint_url=self._endpoint_url(),
            use_ssl=self.config.secure,
            aws_access_key_id=self.config.access_key or None,
            aws_secret_access_key=self.config.secret_key or None,
            config=Config(
                signature_version="s3v4",
                connect_timeout=timeout,
                read_timeout=timeout,
            ),
        )

    def _endpoint_url(self) -> Optional[str]:
        """Endpoint URL with a scheme matching the transport setting."""
        endpoint = self.config.endpoint_url
        if not endpoint:
            return None
        if "://" in endpoint:
            return endpoint
        scheme = "https" if self.config.secure else "http"
        return f"{scheme}://{endpoint}"

    # ============= Operations =============

    def list_blobs(self) -> List[BlobDescriptor]:
        """
        List every object in the bucket.

        Follows the truncation marker until the listing is complete.

        Returns:
            BlobDescriptor for each object, in S3 listing order
        """
        client = self.get_connection()
        params: Dict[str, Any] = {"Bucket": self.bucket, "MaxKeys": LIST_PAGE_SIZE}
        blobs: List[BlobDescriptor] = []
        pages = 0

        while True:
            try:
                response = client.list_objects(**params)
            except (ClientError, BotoCoreError) as e:
                raise self._translate_error(e, "listing") from e

            contents = response.get("Contents", [])
            blobs.extend(
                BlobDescriptor(name=obj["Key"], size=obj["Size"]) for obj in contents
            )
            pages += 1

            if not response.get("IsTruncated"):
                break

            # NextMarker is only returned when a delimiter is used
            marker = response.get("NextMarker") or (contents[-1]["Key"] if contents else None)
            if not marker:
                raise RemoteProtocolError(
                    "listing", None, "truncated listing without a continuation marker"
                )
            params["Marker"] = marker

        logger.debug("Listed %d blobs from %s in %d page(s)", len(blobs), self.bucket, pages)
        return blobs

    def put_blob(
        self,
        local_path: Union[str, Path],
        key: str,
        on_progress: ProgressCallback,
    ) -> None:
        """
        Upload a file with a Content-MD5 so S3 verifies what it received.

        Progress tracks how far botocore has read the file. Over HTTPS the
        body is read as it is sent. Over plain HTTP, SigV4 hashes the whole
        payload before sending, so progress can reach 100 while the bytes
        are still in flight.

        Args:
            local_path: Source file path
            key: Destination key
            on_progress: Percent-complete callback

        Raises:
            IntegrityError: If S3 reports the digest did not match
            AuthError: If S3 rejects the credentials
            RemoteProtocolError: For any other S3 failure
        """
        path = Path(local_path)
        digest = compute_md5_base64(path)
        size = path.stat().st_size
        progress = MonotonicProgress(on_progress)
        client = self.get_connection()

        with path.open("rb") as f:
            try:
                client.put_object(
                    Bucket=self.bucket,
                    Key=key,
                    Body=_ProgressReader(f, size, progress),
                    ContentLength=size,
                    ContentMD5=digest,
                )
            except ClientError as e:
                if _error_code(e) in DIGEST_ERROR_CODES:
                    raise IntegrityError(str(path), key) from e
                raise self._translate_error(e, "upload", key=key, path=str(path)) from e
            except BotoCoreError as e:
                raise self._translate_error(e, "upload", key=key, path=str(path)) from e

        progress.complete()

    def get_blob(self, key: str, on_progress: ProgressCallback) -> bytes:
        """
        Download an object into memory.

        A stream that ends early restarts the whole download, up to
        DOWNLOAD_ATTEMPTS attempts in total.

        Args:
            key: Object key
            on_progress: Percent-complete callback

        Returns:
            Object content; length equals the declared ContentLength

        Raises:
            NotFoundError: If the key does not exist (never retried)
            RetryExhaustedError: If every attempt ended with a dropped stream
            AuthError: If S3 rejects the credentials
            RemoteProtocolError: For any other S3 failure
        """
        progress = MonotonicProgress(on_progress)
        return retry_call(
            lambda: self._download_once(key, progress),
            attempts=DOWNLOAD_ATTEMPTS,
            retryable=(TransientStreamError,),
            subject=key,
            action="downloaded",
        )

    def _download_once(self, key: str, progress: MonotonicProgress) -> bytes:
        """One complete get-object attempt."""
        client = self.get_connection()
        try:
            response = client.get_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            if _error_code(e) in NOT_FOUND_ERROR_CODES:
                raise NotFoundError(key) from e
            raise self._translate_error(e, "download", key=key) from e
        except BotoCoreError as e:
            raise self._translate_error(e, "download", key=key) from e

        length = int(response.get("ContentLength", 0))
        with closing(response["Body"]) as body:
            if length == 0:
                progress(100)
                return b""
            return self._read_body(body, key, length, progress)

    def _read_body(
        self,
        body: Any,
        key: str,
        length: int,
        progress: MonotonicProgress,
    ) -> bytes:
        buffer = bytearray(length)
        view = memoryview(buffer)
        received = 0

        while received < length:
            try:
                chunk = body.read(min(DOWNLOAD_CHUNK_SIZE, length - received))
            except STREAM_FAULTS as e:
                raise TransientStreamError(key, length, received) from e
            if not chunk:
                raise TransientStreamError(key, length, received)
            if len(chunk) > length - received:
                raise RemoteProtocolError(
                    "download", None, f"stream returned more than {length} bytes", key=key
                )

            view[received:received + len(chunk)] = chunk
            received += len(chunk)
            progress(percent_of(received, length))

        return bytes(buffer)

    # ============= Error mapping =============

    def _translate_error(
        self,
        e: Exception,
        operation: str,
        key: Optional[str] = None,
        path: Optional[str] = None,
    ) -> GitBinError:
        """Map a boto error to a user-facing error with operation context."""
        if isinstance(e, NoCredentialsError):
            return AuthError()
        if isinstance(e, ClientError):
            code = _error_code(e)
            if code in AUTH_ERROR_CODES:
                return AuthError()
            return RemoteProtocolError(operation, code, _error_message(e), key=key, path=path)
        return RemoteProtocolError(operation, type(e).__name__, str(e), key=key, path=path)
