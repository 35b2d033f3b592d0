"""Async client for the Internet Archive's Save Page Now 2 (SPN2) API.

The client issues capture requests and inspects capture, user, and system
status.  Polling cadence and retry policy are left to the caller.

Usage::

    from spn2 import APIClient, CapturePending

    async with APIClient(access_key, secret, timeout=5.0) as client:
        capture = await client.request_capture("https://example.com")
        status = await client.get_capture_status(capture.job_id)

API reference:
https://docs.google.com/document/d/1Nsv52MvSjbLb2PCpHlat0gkzw0EvtSgpKHu4mk0MnrA
"""

from __future__ import annotations

from spn2.client import APIClient
from spn2.exceptions import (
    ConfigError,
    DecodeError,
    RequestTimeoutError,
    SPN2Error,
    TransportError,
    UnexpectedStatusError,
)
from spn2.models import (
    CaptureError,
    CapturePending,
    CaptureResponse,
    CaptureStatus,
    CaptureSuccess,
    SystemStatus,
    SystemStatusCritical,
    SystemStatusIssues,
    SystemStatusOk,
    UserStatus,
    parse_capture_status,
    system_status_from_json,
)
from spn2.options import CaptureRequestOptions, encode_capture_request

__version__ = "0.1.0"

__all__ = [
    "APIClient",
    "CaptureError",
    "CapturePending",
    "CaptureRequestOptions",
    "CaptureResponse",
    "CaptureStatus",
    "CaptureSuccess",
    "ConfigError",
    "DecodeError",
    "RequestTimeoutError",
    "SPN2Error",
    "SystemStatus",
    "SystemStatusCritical",
    "SystemStatusIssues",
    "SystemStatusOk",
    "TransportError",
    "UnexpectedStatusError",
    "UserStatus",
    "encode_capture_request",
    "parse_capture_status",
    "system_status_from_json",
]
