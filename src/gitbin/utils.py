"""Utility functions for git-bin."""

from .models import ProgressCallback


def humanize_size(size: float) -> str:
    """Convert bytes to human-readable format."""
    for unit in ["B", "KB", "MB", "GB"]:
        if size < 1024.:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} TB"


def percent_of(done: int, total: int) -> int:
    """Integer percentage of total, clamped to 0..100. An empty total is complete."""
    if total <= 0:
        return 100
    return max(0, min(100, (done * 100) // total))


class MonotonicProgress:
    """
    Wraps a progress callback so reported values never go backwards.

    Transfers may re-read a body (request signing, checksums, retries); only
    strictly increasing percentages are forwarded.
    """

    def __init__(self, callback: ProgressCallback):
        self._callback = callback
        self.last = -1

    def __call__(self, percent: int) -> None:
        percent = max(0, min(100, percent))
        if percent > self.last:
            self.last = percent
            self._callback(percent)

    def complete(self) -> None:
        """Report 100 if it has not been reported yet."""
        self(100)
