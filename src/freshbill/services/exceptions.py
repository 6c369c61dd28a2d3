from __future__ import annotations


class FeedError(Exception):
    """The catalog feed could not be fetched (network error or non-2xx status)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class FeedDecodeError(ValueError):
    """The feed body was fetched but yielded no usable products."""


class PrintUnavailableError(RuntimeError):
    """No print spooler command is available on this host."""
