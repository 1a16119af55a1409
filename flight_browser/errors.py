"""Failure taxonomy for remote fetches.

Every failure carries a human-readable ``reason`` that the views surface in
the section the failed resource belongs to.
"""

from typing import Optional


class FetchError(Exception):
    """Base class for any failure while fetching or decoding a resource."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class NetworkFailure(FetchError):
    """The request could not complete (DNS, refused connection, timeout)."""


class HttpError(FetchError):
    """The remote answered with a non-success status."""

    def __init__(self, reason: str, status_code: Optional[int] = None) -> None:
        super().__init__(reason)
        self.status_code = status_code


class NotFound(HttpError):
    """The requested airport or flight does not exist remotely."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason, status_code=404)


class MalformedPayload(FetchError):
    """The response body does not match the expected record contract."""


class InvalidBirthDate(MalformedPayload):
    """A passenger birth date is not an ISO ``YYYY-MM-DD`` string."""


__all__ = [
    "FetchError",
    "NetworkFailure",
    "HttpError",
    "NotFound",
    "MalformedPayload",
    "InvalidBirthDate",
]
