"""Pydantic models for SPN2 responses.

Wire types (:class:`CaptureResponse`, the three :data:`CaptureStatus`
variants, :class:`UserStatus`) are validated straight from the response
body.  :data:`SystemStatus` is derived: the API only reports a free-text
``status`` string, or fails with HTTP 502 when it is down.

All models are immutable.  Fields the API sends but this client does not
model (``job_id`` on status responses, ``http_status``, ``counters``, ...)
are ignored.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from spn2.config import SPN2_WAYBACK_URL_TEMPLATE
from spn2.exceptions import DecodeError

logger = logging.getLogger(__name__)


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", strict=True)


# ---------------------------------------------------------------------------
# Capture request / status
# ---------------------------------------------------------------------------


class CaptureResponse(_FrozenModel):
    """Answer to an accepted capture request.

    Attributes:
        url: The URL that will be captured.
        job_id: Handle for :meth:`~spn2.client.APIClient.get_capture_status`.
    """

    url: str
    job_id: str


class CapturePending(_FrozenModel):
    """The capture job has not finished yet.

    Attributes:
        resources: Resources fetched so far, in the order reported.
    """

    status: Literal["pending"] = "pending"
    resources: List[str]

    @property
    def is_terminal(self) -> bool:
        return False


class CaptureError(_FrozenModel):
    """The capture job failed.

    Attributes:
        exception: Low-level exception text, when the API reports one.
        status_ext: Machine-readable error code, e.g. ``"error:invalid-host-resolution"``.
        message: Human-readable error message.
        resources: Resources fetched before the failure.
    """

    status: Literal["error"] = "error"
    exception: Optional[str] = None
    status_ext: str
    message: str
    resources: List[str]

    @property
    def is_terminal(self) -> bool:
        return True


class CaptureSuccess(_FrozenModel):
    """The capture job finished and the page is archived.

    Attributes:
        original_url: The requested URL after redirects.
        screenshot: Screenshot URL, when a screenshot was requested.
        timestamp: Capture timestamp in ``YYYYMMDDHHMMSS`` format.
        duration_sec: Time the service spent on the capture.
        resources: Every resource captured.
        outlinks: Links to other pages found on the captured page.
    """

    status: Literal["success"] = "success"
    original_url: str
    screenshot: Optional[str] = None
    timestamp: str
    duration_sec: float
    resources: List[str]
    outlinks: List[str]

    @property
    def is_terminal(self) -> bool:
        return True

    @property
    def captured_at(self) -> datetime | None:
        """``timestamp`` as a UTC datetime, or ``None`` if it is malformed."""
        try:
            return datetime.strptime(self.timestamp, "%Y%m%d%H%M%S").replace(
                tzinfo=timezone.utc
            )
        except ValueError:
            logger.debug("spn2: could not parse capture timestamp '%s'", self.timestamp)
            return None

    @property
    def archive_url(self) -> str:
        """Wayback Machine playback URL for this capture."""
        return SPN2_WAYBACK_URL_TEMPLATE.format(
            timestamp=self.timestamp, url=self.original_url
        )


CaptureStatus = Annotated[
    Union[CapturePending, CaptureError, CaptureSuccess],
    Field(discriminator="status"),
]
"""Capture job status, selected by the ``status`` field of the response."""

_CAPTURE_STATUS_ADAPTER: TypeAdapter[CaptureStatus] = TypeAdapter(CaptureStatus)


def parse_capture_status(
    payload: dict[str, Any] | str | bytes,
) -> CapturePending | CaptureError | CaptureSuccess:
    """Decode a capture status response.

    The variant is chosen solely by the ``status`` field.  Values other than
    ``"pending"``, ``"error"`` and ``"success"`` are rejected.

    Args:
        payload: The decoded JSON object, or the raw JSON text.

    Returns:
        The matching :data:`CaptureStatus` variant.

    Raises:
        DecodeError: If the payload is not valid JSON, has no recognised
            ``status``, or lacks a field required by its variant.
    """
    try:
        if isinstance(payload, (str, bytes, bytearray)):
            return _CAPTURE_STATUS_ADAPTER.validate_json(payload)
        return _CAPTURE_STATUS_ADAPTER.validate_python(payload)
    except ValidationError as exc:
        raise DecodeError(f"invalid capture status: {exc}", body=payload) from exc


# ---------------------------------------------------------------------------
# User status
# ---------------------------------------------------------------------------


class UserStatus(_FrozenModel):
    """Capture quota of the authenticated account.

    Attributes:
        available: Capture sessions the account may still start.
        processing: Capture sessions currently running.
    """

    available: int = Field(ge=0)
    processing: int = Field(ge=0)


# ---------------------------------------------------------------------------
# System status
# ---------------------------------------------------------------------------


class SystemStatusOk(_FrozenModel):
    """The service is operating normally."""

    state: Literal["ok"] = "ok"


class SystemStatusIssues(_FrozenModel):
    """The service works but reports a problem, e.g. overload.

    Attributes:
        description: The status text reported by the API, verbatim.
    """

    state: Literal["issues"] = "issues"
    description: str


class SystemStatusCritical(_FrozenModel):
    """The service is down (the status endpoint answered HTTP 502)."""

    state: Literal["critical"] = "critical"


SystemStatus = Union[SystemStatusOk, SystemStatusIssues, SystemStatusCritical]


def system_status_from_json(payload: Any) -> SystemStatusOk | SystemStatusIssues:
    """Map a system status response body to :data:`SystemStatus`.

    ``{"status": "ok"}`` maps to :class:`SystemStatusOk`; any other string is
    kept verbatim as :class:`SystemStatusIssues`.  A body can never yield
    :class:`SystemStatusCritical`; only an HTTP 502 does.

    Args:
        payload: The decoded JSON value, or the raw JSON text.

    Raises:
        DecodeError: If the payload is not a JSON object with a string
            ``status`` field.
    """
    if isinstance(payload, (str, bytes, bytearray)):
        try:
            payload = json.loads(payload)
        except ValueError as exc:
            raise DecodeError(f"invalid system status JSON: {exc}", body=payload) from exc

    status = payload.get("status") if isinstance(payload, dict) else None
    if not isinstance(status, str):
        raise DecodeError(f"invalid system status: {payload!r}", body=payload)

    if status == "ok":
        return SystemStatusOk()
    return SystemStatusIssues(description=status)
