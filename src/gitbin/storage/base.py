"""Base protocol for blob storage implementations."""

from pathlib import Path
from typing import List, Protocol, Union

from ..models import BlobDescriptor, ProgressCallback


class BlobStore(Protocol):
    """
    Protocol for remote blob storage implementations.

    All implementations must provide list/put/get operations. Calls block
    until the transfer completes, and progress callbacks run synchronously
    on the calling thread.
    """

    def list_blobs(self) -> List[BlobDescriptor]:
        """
        List every blob in the store.

        Returns:
            Complete listing in the store's natural order. Any failure
            aborts the whole listing.
        """
        ...

    def put_blob(
        self,
        local_path: Union[str, Path],
        key: str,
        on_progress: ProgressCallback,
    ) -> None:
        """
        Upload a local file under the given key.

        Args:
            local_path: Readable local file
            key: Destination key
            on_progress: Called with non-decreasing percentages ending at 100
        """
        ...

    def get_blob(self, key: str, on_progress: ProgressCallback) -> bytes:
        """
        Download a blob into memory.

        Args:
            key: Remote key
            on_progress: Called with non-decreasing percentages ending at 100

        Returns:
            Exactly the declared content length of bytes
        """
        ...
