"""Exception hierarchy for the SPN2 client.

Every error raised by :class:`~spn2.client.APIClient` subclasses
``SPN2Error`` so callers can catch the whole family at once, or branch on
the concrete type to choose between retrying and giving up.

Hierarchy::

    SPN2Error
    ├── ConfigError
    ├── TransportError
    │   └── RequestTimeoutError
    ├── UnexpectedStatusError   (status_code, body)
    └── DecodeError             (body)
"""

from __future__ import annotations


class SPN2Error(Exception):
    """Base class for all SPN2 client exceptions."""


class ConfigError(SPN2Error):
    """Raised when the client cannot be constructed from the given input.

    Typically the access key or secret contains characters that are not
    allowed in an HTTP header value.  Retrying without fixing the input
    cannot succeed.
    """


class TransportError(SPN2Error):
    """Raised when a request fails before an HTTP response is received.

    Covers DNS failures, refused connections, TLS errors, and dropped
    connections.  The request may be retried at the caller's discretion.

    Args:
        message: Human-readable description of the failure.
        url: The URL that was being requested.
    """

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class RequestTimeoutError(TransportError):
    """Raised when a request exceeds the client's configured timeout.

    Args:
        message: Human-readable description of the failure.
        url: The URL that was being requested.
        timeout: The timeout, in seconds, that applied to the request.
    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        timeout: float | None = None,
    ) -> None:
        super().__init__(message, url=url)
        self.timeout = timeout


class UnexpectedStatusError(SPN2Error):
    """Raised when the API answers with a status code the operation does not accept.

    Args:
        status_code: The HTTP status code received.
        body: Response text (truncated) for diagnostics, or ``None``.
        url: The URL that was requested.
    """

    def __init__(
        self,
        status_code: int,
        body: str | None = None,
        url: str | None = None,
    ) -> None:
        super().__init__(f"unexpected response status: HTTP {status_code}")
        self.status_code = status_code
        self.body = body
        self.url = url


class DecodeError(SPN2Error):
    """Raised when a response body does not have the expected shape.

    Missing required fields, wrong types, malformed JSON, and unknown
    ``status`` discriminators all end up here.

    Args:
        message: Description of the decoding failure.
        body: The raw payload that could not be decoded (for debugging).
    """

    def __init__(self, message: str, body: object = None) -> None:
        super().__init__(message)
        self.body = body
