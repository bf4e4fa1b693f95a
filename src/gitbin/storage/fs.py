"""Filesystem blob storage implementation for testing and offline use."""

import os
import tempfile
from pathlib import Path, PurePosixPath
from typing import List, Union

from ..errors import IntegrityError, InvalidKeyError, NotFoundError
from ..hashing import compute_md5_base64
from ..models import BlobDescriptor, ProgressCallback
from ..utils import MonotonicProgress, percent_of

CHUNK_SIZE = 1024 * 1024


class FilesystemBlobStore:
    """
    Local directory acting as a remote store (avoids an S3 dependency in tests).

    Keys map to relative POSIX paths under base_dir.
    """

    def __init__(self, base_dir: Path):
        """
        Initialize filesystem store.

        Args:
            base_dir: Base directory for blob storage
        """
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def list_blobs(self) -> List[BlobDescriptor]:
        """
        List all stored blobs, sorted by key.

        Partially written files (".<name>.partial-*") are skipped.
        """
        blobs = []
        for path in sorted(p for p in self.base_dir.rglob("*") if p.is_file()):
            if path.name.startswith(".") and ".partial-" in path.name:
                continue
            key = path.relative_to(self.base_dir).as_posix()
            blobs.append(BlobDescriptor(name=key, size=path.stat().st_size))
        return blobs

    def put_blob(
        self,
        local_path: Union[str, Path],
        key: str,
        on_progress: ProgressCallback,
    ) -> None:
        """
        Copy a file into the store, then verify the stored copy's MD5.

        Args:
            local_path: Source file path
            key: Destination key
            on_progress: Percent-complete callback

        Raises:
            IntegrityError: If the stored copy does not match the source digest
        """
        src = Path(local_path)
        dest = self._key_path(key)
        expected = compute_md5_base64(src)
        total = src.stat().st_size
        progress = MonotonicProgress(on_progress)

        dest.parent.mkdir(parents=True, exist_ok=True)
        tmp = None
        try:
            # Unique temp name per writer so concurrent puts to one key never share a file
            with src.open("rb") as fin, tempfile.NamedTemporaryFile(
                mode="wb",
                delete=False,
                dir=dest.parent,
                prefix=f".{dest.name}.partial-",
            ) as fout:
                tmp = Path(fout.name)
                copied = 0
                for chunk in iter(lambda: fin.read(CHUNK_SIZE), b""):
                    fout.write(chunk)
                    copied += len(chunk)
                    progress(percent_of(copied, total))

            if compute_md5_base64(tmp) != expected:
                raise IntegrityError(str(src), key)
            os.replace(tmp, dest)
        finally:
            if tmp is not None and tmp.exists():
                tmp.unlink()

        progress.complete()

    def get_blob(self, key: str, on_progress: ProgressCallback) -> bytes:
        """
        Read a blob into memory.

        Raises:
            NotFoundError: If no blob exists under key
        """
        path = self._key_path(key)
        if not path.is_file():
            raise NotFoundError(key, remote="filesystem store")

        progress = MonotonicProgress(on_progress)
        total = path.stat().st_size
        if total == 0:
            progress(100)
            return b""

        buffer = bytearray()
        with path.open("rb") as f:
            for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
                buffer.extend(chunk)
                progress(percent_of(len(buffer), total))
        progress.complete()
        return bytes(buffer)

    def _key_path(self, key: str) -> Path:
        """
        Resolve a key to a path inside base_dir.

        Raises:
            InvalidKeyError: If the key is empty, absolute, or escapes base_dir
        """
        if not key or not key.strip():
            raise InvalidKeyError(key, "empty key")

        parts = PurePosixPath(key.replace("\\", "/")).parts
        if key.startswith(("/", "\\")) or ".." in parts:
            raise InvalidKeyError(key, "absolute path or parent traversal")

        target = (self.base_dir / Path(*parts)).resolve()
        try:
            target.relative_to(self.base_dir.resolve())
        except ValueError:
            raise InvalidKeyError(key, "escapes store directory")
        return target
