"""Optional parameters of a capture request and their form encoding.

SPN2 takes capture options as ``application/x-www-form-urlencoded`` fields
next to ``url``.  Booleans are always sent, as ``"1"`` or ``"0"``.  Every
other option is sent only when set: durations as whole seconds, strings
verbatim.  Field order is fixed so encoded bodies are reproducible.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

_BOOL_FIELDS: tuple[str, ...] = (
    "capture_all",
    "capture_outlinks",
    "capture_screenshot",
    "delay_wb_availability",
    "force_get",
    "skip_first_archive",
    "outlinks_availability",
    "email_result",
)

_DURATION_FIELDS: tuple[str, ...] = (
    "if_not_archived_within",
    "js_behavior_timeout",
)

_STRING_FIELDS: tuple[str, ...] = (
    "capture_cookie",
    "use_user_agent",
    "target_username",
    "target_password",
)


class CaptureRequestOptions(BaseModel):
    """Options accepted by the SPN2 capture endpoint.

    Durations accept a :class:`~datetime.timedelta` or a number of seconds.

    Attributes:
        capture_all: Also capture error pages (4xx/5xx).
        capture_outlinks: Capture the pages linked from the target page.
        capture_screenshot: Store a PNG screenshot of the page.
        delay_wb_availability: Delay availability in the Wayback Machine by
            about 12 hours to lower the load on the service.
        force_get: Skip the headless browser and capture with a plain GET.
        skip_first_archive: Skip the check whether this is the page's first
            capture, which makes captures faster.
        outlinks_availability: Report whether outlinks are already archived.
        email_result: Email a capture report to the account owner.
        if_not_archived_within: Only capture if the latest capture is older
            than this.
        js_behavior_timeout: How long the browser runs JS behaviours after
            page load.
        capture_cookie: Extra HTTP cookie sent with the capture request.
        use_user_agent: User-Agent header for the capture.
        target_username: Login name for sites that need authentication.
        target_password: Password for sites that need authentication.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    capture_all: bool = False
    capture_outlinks: bool = False
    capture_screenshot: bool = False
    delay_wb_availability: bool = False
    force_get: bool = False
    skip_first_archive: bool = False
    outlinks_availability: bool = False
    email_result: bool = False

    if_not_archived_within: Optional[timedelta] = None
    js_behavior_timeout: Optional[timedelta] = None

    capture_cookie: Optional[str] = Field(default=None, repr=False)
    use_user_agent: Optional[str] = None
    target_username: Optional[str] = None
    target_password: Optional[str] = Field(default=None, repr=False)

    @field_validator(*_DURATION_FIELDS)
    @classmethod
    def _non_negative(cls, v: Optional[timedelta]) -> Optional[timedelta]:
        if v is not None and v < timedelta(0):
            raise ValueError("duration must not be negative")
        return v

    def to_form(self) -> list[tuple[str, str]]:
        """Return the options as ordered form fields, omitting unset optionals."""
        fields: list[tuple[str, str]] = [
            (name, "1" if getattr(self, name) else "0") for name in _BOOL_FIELDS
        ]
        for name in _DURATION_FIELDS:
            value: Optional[timedelta] = getattr(self, name)
            if value is not None:
                fields.append((name, str(int(value.total_seconds()))))
        for name in _STRING_FIELDS:
            value_str: Optional[str] = getattr(self, name)
            if value_str is not None:
                fields.append((name, value_str))
        return fields


def encode_capture_request(
    url: str,
    options: CaptureRequestOptions | None = None,
) -> list[tuple[str, str]]:
    """Build the form fields of a capture request.

    Args:
        url: The URL to capture.  Always the first field.
        options: Capture options; defaults are used when ``None``.

    Returns:
        Ordered ``(name, value)`` pairs ready for ``urllib.parse.urlencode``.
    """
    options = options if options is not None else CaptureRequestOptions()
    return [("url", url), *options.to_form()]
