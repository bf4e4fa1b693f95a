"""Content digests sent alongside uploads.

The remote expects the Content-MD5 form: base64 of the raw 16-byte MD5
digest, not the hex string.
"""

import base64
import hashlib
from pathlib import Path


def compute_md5_base64(path: Path) -> str:
    """Compute the base64-encoded MD5 digest of a file's contents.

    Args:
        path: Path to file to hash

    Returns:
        Base64 digest, e.g. "XUFAKrxLKna5cZ2REBfFkg=="
    """
    md5 = hashlib.md5()
    with Path(path).open("rb") as f:
        for chunk in iter(lambda: f.read(8192), b""):
            md5.update(chunk)
    return base64.b64encode(md5.digest()).decode("ascii")


def md5_base64_of_bytes(data: bytes) -> str:
    """Base64-encoded MD5 digest of an in-memory payload."""
    return base64.b64encode(hashlib.md5(data).digest()).decode("ascii")


__all__ = [
    "compute_md5_base64",
    "md5_base64_of_bytes",
]
