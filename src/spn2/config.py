"""Configuration for the SPN2 client.

Defines the fixed SPN2 endpoints, protocol constants, and the optional
environment-backed :class:`Settings` used by
:meth:`spn2.client.APIClient.from_settings`.

Endpoint URLs are process-wide constants.  They are not read from the
environment; tests and proxies may pass a different ``base_url`` to
:class:`~spn2.client.APIClient` instead.

Usage::

    from spn2.config import get_settings

    settings = get_settings()
    timeout = settings.timeout
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

# ---------------------------------------------------------------------------
# API constants
# ---------------------------------------------------------------------------

SPN2_BASE_URL: str = "https://web.archive.org"
"""Scheme and host serving every SPN2 endpoint."""

SPN2_CAPTURE_PATH: str = "/save"
SPN2_CAPTURE_STATUS_PATH: str = "/save/status"
SPN2_USER_STATUS_PATH: str = "/save/status/user"
SPN2_SYSTEM_STATUS_PATH: str = "/save/status/system"

SPN2_CAPTURE_URL: str = SPN2_BASE_URL + SPN2_CAPTURE_PATH
"""``POST`` target for capture requests (form-encoded body)."""

SPN2_CAPTURE_STATUS_URL: str = SPN2_BASE_URL + SPN2_CAPTURE_STATUS_PATH
"""Prefix for capture status lookups; the job ID is appended as a path segment."""

SPN2_USER_STATUS_URL: str = SPN2_BASE_URL + SPN2_USER_STATUS_PATH
"""Quota counters for the authenticated account.

Requested with a ``_t=<unix seconds>`` query parameter so intermediaries
never serve a cached answer.
"""

SPN2_SYSTEM_STATUS_URL: str = SPN2_BASE_URL + SPN2_SYSTEM_STATUS_PATH
"""Health of the SPN2 service.  Returns HTTP 502 when the service is down."""

SPN2_WAYBACK_URL_TEMPLATE: str = "https://web.archive.org/web/{timestamp}/{url}"
"""Playback URL of a finished capture."""

SPN2_AUTH_SCHEME: str = "LOW"
"""Authorization scheme for S3-style access key / secret pairs."""

SPN2_DEFAULT_TIMEOUT: float = 30.0
"""Default per-request timeout in seconds."""

SPN2_POLL_INTERVAL: float = 2.0
"""Seconds between capture status polls in the bundled demo script."""

SPN2_ERROR_BODY_MAX_CHARS: int = 2048
"""Upper bound on response text kept on :class:`~spn2.exceptions.UnexpectedStatusError`."""


# ---------------------------------------------------------------------------
# Environment-backed settings
# ---------------------------------------------------------------------------


class Settings(BaseSettings):
    """Client settings read from ``SPN2_*`` environment variables or a ``.env`` file.

    Nothing in the library reads these implicitly.  Callers opt in through
    :meth:`spn2.client.APIClient.from_settings`.
    """

    model_config = SettingsConfigDict(
        env_prefix="SPN2_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    access_key: Optional[str] = None
    """S3-style access key from https://archive.org/account/s3.php."""

    secret: Optional[SecretStr] = None
    """Secret paired with ``access_key``.  Never rendered in ``repr()``."""

    timeout: float = Field(default=SPN2_DEFAULT_TIMEOUT, gt=0)
    """Per-request timeout in seconds."""

    log_level: str = "INFO"
    """Default ``--log-level`` of ``scripts/capture_url.py``, passed to
    :func:`spn2.logging_config.configure_logging`."""


@lru_cache
def get_settings() -> Settings:
    """Return the cached process-wide :class:`Settings` instance."""
    return Settings()
