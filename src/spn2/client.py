"""Async client for the SPN2 capture API.

:class:`APIClient` wraps a single :class:`httpx.AsyncClient` that carries the
fixed ``Authorization`` and ``Accept`` headers.  Each public method performs
exactly one request, bounded by the client's timeout, and maps the response
to a model from :mod:`spn2.models` or to an exception from
:mod:`spn2.exceptions`:

- Connection problems raise :class:`~spn2.exceptions.TransportError`
  (:class:`~spn2.exceptions.RequestTimeoutError` when the timeout expired).
- A status code the operation does not accept raises
  :class:`~spn2.exceptions.UnexpectedStatusError`.
- A body of the wrong shape raises :class:`~spn2.exceptions.DecodeError`.

Nothing is retried.  The ``Authorization`` header is never logged.
"""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import timedelta
from typing import Any, TypeVar
from urllib.parse import quote, urlencode

import httpx
from pydantic import BaseModel, SecretStr, ValidationError

from spn2.config import (
    SPN2_AUTH_SCHEME,
    SPN2_BASE_URL,
    SPN2_CAPTURE_PATH,
    SPN2_CAPTURE_STATUS_PATH,
    SPN2_DEFAULT_TIMEOUT,
    SPN2_ERROR_BODY_MAX_CHARS,
    SPN2_SYSTEM_STATUS_PATH,
    SPN2_USER_STATUS_PATH,
    Settings,
    get_settings,
)
from spn2.exceptions import (
    ConfigError,
    DecodeError,
    RequestTimeoutError,
    TransportError,
    UnexpectedStatusError,
)
from spn2.models import (
    CaptureError,
    CapturePending,
    CaptureResponse,
    CaptureSuccess,
    SystemStatus,
    SystemStatusCritical,
    UserStatus,
    parse_capture_status,
    system_status_from_json,
)
from spn2.options import CaptureRequestOptions, encode_capture_request

logger = logging.getLogger(__name__)

_ModelT = TypeVar("_ModelT", bound=BaseModel)

_FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def _is_valid_header_value(value: str) -> bool:
    """Return True if *value* only holds visible ASCII, spaces and tabs."""
    return all(ch == "\t" or " " <= ch <= "~" for ch in value)


def _timeout_seconds(timeout: float | timedelta) -> float:
    seconds = timeout.total_seconds() if isinstance(timeout, timedelta) else float(timeout)
    if seconds <= 0:
        raise ConfigError(f"timeout must be positive, got {seconds!r}")
    return seconds


def _unix_timestamp() -> int:
    return int(time.time())


class APIClient:
    """Client for the SPN2 API.

    One instance may serve many concurrent calls.  Changing the timeout only
    affects calls that start afterwards.

    Args:
        access_key: S3-style access key of the archive.org account.
        secret: Secret paired with *access_key*.
        timeout: Per-request timeout, in seconds or as a ``timedelta``.
        transport: Optional :class:`httpx.AsyncBaseTransport` (for testing or
            custom connection handling).
        base_url: Scheme and host of the API.  Defaults to the public service.

    Raises:
        ConfigError: If the credentials cannot form a valid header value, the
            timeout is not positive, or the HTTP client cannot be created.
    """

    def __init__(
        self,
        access_key: str,
        secret: str | SecretStr,
        timeout: float | timedelta = SPN2_DEFAULT_TIMEOUT,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        base_url: str = SPN2_BASE_URL,
    ) -> None:
        secret_value = secret.get_secret_value() if isinstance(secret, SecretStr) else secret
        auth_value = f"{SPN2_AUTH_SCHEME} {access_key}:{secret_value}"
        if not _is_valid_header_value(auth_value):
            raise ConfigError("access key or secret contains invalid header characters")

        self._timeout = _timeout_seconds(timeout)
        self._base_url = base_url.rstrip("/")
        try:
            self._http = httpx.AsyncClient(
                headers={
                    "Authorization": auth_value,
                    "Accept": "application/json",
                },
                transport=transport,
            )
        except OSError as exc:
            raise ConfigError(f"could not create HTTP client: {exc}") from exc

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        **kwargs: Any,
    ) -> "APIClient":
        """Build a client from ``SPN2_*`` settings.

        Args:
            settings: Settings to use; defaults to :func:`spn2.config.get_settings`.
            **kwargs: Passed through to the constructor (``transport``, ``base_url``).

        Raises:
            ConfigError: If the access key or secret is not configured.
        """
        settings = settings if settings is not None else get_settings()
        if not settings.access_key or settings.secret is None:
            raise ConfigError("SPN2_ACCESS_KEY and SPN2_SECRET must both be set")
        return cls(settings.access_key, settings.secret, settings.timeout, **kwargs)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def timeout(self) -> float:
        """Per-request timeout in seconds."""
        return self._timeout

    def set_timeout(self, timeout: float | timedelta) -> None:
        """Set the timeout for requests started from now on.

        Raises:
            ConfigError: If *timeout* is not positive.
        """
        self._timeout = _timeout_seconds(timeout)

    async def aclose(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self._http.aclose()

    async def __aenter__(self) -> "APIClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def __repr__(self) -> str:
        return f"<APIClient base_url={self._base_url!r} timeout={self._timeout!r}>"

    # ------------------------------------------------------------------
    # API operations
    # ------------------------------------------------------------------

    async def request_capture(
        self,
        url: str,
        options: CaptureRequestOptions | None = None,
    ) -> CaptureResponse:
        """Ask SPN2 to capture *url*.

        Args:
            url: The URL to archive.
            options: Capture options; all defaults when ``None``.

        Returns:
            The accepted capture with the ``job_id`` to poll.

        Raises:
            TransportError: On network failure or timeout.
            UnexpectedStatusError: On any status other than HTTP 200.
            DecodeError: If the body is not a capture response.
        """
        body = urlencode(encode_capture_request(url, options))
        response = await self._send(
            "POST",
            SPN2_CAPTURE_PATH,
            content=body,
            headers={"Content-Type": _FORM_CONTENT_TYPE},
        )
        self._expect_ok(response)
        capture = self._decode(CaptureResponse, response)
        logger.info("spn2: capture requested url=%s job_id=%s", capture.url, capture.job_id)
        return capture

    async def get_capture_status(
        self,
        job_id: str,
    ) -> CapturePending | CaptureError | CaptureSuccess:
        """Fetch the current status of capture job *job_id*.

        Pending is not terminal; polling cadence is up to the caller.

        Raises:
            TransportError: On network failure or timeout.
            UnexpectedStatusError: On any status other than HTTP 200.
            DecodeError: If the body has no recognised ``status`` or lacks
                required fields.
        """
        response = await self._send(
            "GET", f"{SPN2_CAPTURE_STATUS_PATH}/{quote(job_id, safe='')}"
        )
        self._expect_ok(response)
        return parse_capture_status(response.content)

    async def get_user_status(self) -> UserStatus:
        """Fetch the capture quota of the authenticated account.

        A ``_t`` query parameter holding the current Unix time defeats
        caching by intermediaries.

        Raises:
            TransportError: On network failure or timeout.
            UnexpectedStatusError: On any status other than HTTP 200.
            DecodeError: If the body is not a user status.
        """
        response = await self._send(
            "GET", SPN2_USER_STATUS_PATH, params={"_t": str(_unix_timestamp())}
        )
        self._expect_ok(response)
        return self._decode(UserStatus, response)

    async def get_system_status(self) -> SystemStatus:
        """Fetch the health of the SPN2 service.

        HTTP 502 means the service is down and maps to
        :class:`~spn2.models.SystemStatusCritical` without reading the body.

        Raises:
            TransportError: On network failure or timeout.
            UnexpectedStatusError: On any status other than HTTP 200 or 502.
            DecodeError: If a 200 body has no string ``status`` field.
        """
        response = await self._send("GET", SPN2_SYSTEM_STATUS_PATH)
        if response.status_code == httpx.codes.BAD_GATEWAY:
            logger.warning("spn2: system status endpoint returned 502; service is down")
            return SystemStatusCritical()
        self._expect_ok(response)
        return system_status_from_json(response.content)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _send(
        self,
        method: str,
        path: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """Send one request with the timeout in effect when the call started.

        httpx applies the timeout per phase; ``asyncio.wait_for`` caps the
        whole exchange, including a body that trickles in slowly.
        """
        url = self._base_url + path
        timeout = self._timeout
        started = time.perf_counter()
        try:
            response = await asyncio.wait_for(
                self._http.request(method, url, timeout=timeout, **kwargs),
                timeout=timeout,
            )
        except (httpx.TimeoutException, asyncio.TimeoutError) as exc:
            logger.warning("spn2: %s %s timed out after %.1fs", method, path, timeout)
            raise RequestTimeoutError(
                f"request timed out after {timeout}s: {exc}", url=url, timeout=timeout
            ) from exc
        except httpx.RequestError as exc:
            logger.warning("spn2: %s %s failed: %s", method, path, exc)
            raise TransportError(f"request failed: {exc}", url=url) from exc

        logger.debug(
            "spn2: %s %s -> HTTP %d (%.1f ms)",
            method,
            path,
            response.status_code,
            (time.perf_counter() - started) * 1000,
        )
        return response

    @staticmethod
    def _expect_ok(response: httpx.Response) -> None:
        if response.status_code == httpx.codes.OK:
            return
        logger.warning(
            "spn2: unexpected HTTP %d from %s", response.status_code, response.request.url.path
        )
        raise UnexpectedStatusError(
            response.status_code,
            body=response.text[:SPN2_ERROR_BODY_MAX_CHARS] or None,
            url=str(response.request.url),
        )

    @staticmethod
    def _decode(model: type[_ModelT], response: httpx.Response) -> _ModelT:
        try:
            return model.model_validate_json(response.content)
        except ValidationError as exc:
            raise DecodeError(
                f"invalid {model.__name__} from {response.request.url.path}: {exc}",
                body=response.text,
            ) from exc
