"""Custom exceptions for git-bin.

Every error a user can act on derives from GitBinError and carries an
ErrorKind. The CLI prints these as a single line and exits 1; anything
else reaching the top level is treated as an internal fault.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Category of a known failure."""
    CONFIGURATION = "configuration"
    AUTHENTICATION = "authentication"
    NOT_FOUND = "not_found"
    INTEGRITY = "integrity"
    INVALID_KEY = "invalid_key"
    TRANSIENT_STREAM = "transient_stream"
    RETRY_EXHAUSTED = "retry_exhausted"
    REMOTE_PROTOCOL = "remote_protocol"


class GitBinError(RuntimeError):
    """Base class for all user-facing git-bin errors."""
    kind: ErrorKind = ErrorKind.REMOTE_PROTOCOL


class ConfigError(GitBinError):
    """Configuration missing or invalid."""
    kind = ErrorKind.CONFIGURATION


class AuthError(GitBinError):
    """Remote rejected the access key or secret key."""
    kind = ErrorKind.AUTHENTICATION

    def __init__(self, message: str = "S3 error: check your access key and secret access key"):
        super().__init__(message)


class NotFoundError(GitBinError):
    """Requested key does not exist on the remote."""
    kind = ErrorKind.NOT_FOUND

    def __init__(self, key: str, remote: str = "S3"):
        self.key = key
        super().__init__(f"File not found on {remote}: {key}")


class InvalidKeyError(GitBinError):
    """Key cannot be mapped to a location inside the store."""
    kind = ErrorKind.INVALID_KEY

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Invalid key {key!r}: {reason}")


class IntegrityError(GitBinError):
    """Remote rejected an upload because the content digest did not match."""
    kind = ErrorKind.INTEGRITY

    def __init__(self, path: str, key: str):
        self.path = path
        self.key = key
        super().__init__(
            f"MD5 hash is invalid. Data was malformed in transit "
            f"(file: {path}, key: {key})"
        )


class TransientStreamError(GitBinError):
    """Download stream ended before the declared content length was read."""
    kind = ErrorKind.TRANSIENT_STREAM

    def __init__(self, key: str, expected: int, received: int):
        self.key = key
        self.expected = expected
        self.received = received
        super().__init__(
            f"Download stream ended before complete file was read: {key} "
            f"({received} of {expected} bytes)"
        )


class RetryExhaustedError(GitBinError):
    """A retried operation failed on every attempt."""
    kind = ErrorKind.RETRY_EXHAUSTED

    def __init__(
        self,
        subject: str,
        attempts: int,
        last_error: Exception,
        action: str = "processed",
    ):
        self.subject = subject
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"File could not be successfully {action} after {attempts} attempts: "
            f"{subject} (last error: {last_error})"
        )


class RemoteProtocolError(GitBinError):
    """Any other failure reported by the remote."""
    kind = ErrorKind.REMOTE_PROTOCOL

    def __init__(
        self,
        operation: str,
        code: Optional[str],
        message: Optional[str],
        key: Optional[str] = None,
        path: Optional[str] = None,
    ):
        self.operation = operation
        self.code = code
        self.remote_message = message
        self.key = key
        self.path = path

        details = []
        if path is not None:
            details.append(f"file: {path}")
        if key is not None:
            details.append(f"key: {key}")
        context = f" ({', '.join(details)})" if details else ""
        super().__init__(
            f"Error during {operation}{context}: "
            f"S3 error: code [{code}], message [{message}]"
        )
