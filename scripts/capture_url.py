#!/usr/bin/env python3
"""Capture a URL with SPN2 and poll until the capture job finishes.

Prints the user's quota before and after, the job's progress every
``SPN2_POLL_INTERVAL`` seconds, and finally the SPN2 system status.

Usage:
    python scripts/capture_url.py <access_key> <secret_file> <url> [--log-level LEVEL]

Environment variables:
    SPN2_LOG_LEVEL  Default for --log-level (default: INFO).

Arguments:
    access_key   S3-style access key of the archive.org account.
    secret_file  Path to a file holding the matching secret.
    url          The URL to capture.

Exit codes:
    0  Capture succeeded
    1  Capture failed, an API call raised, or the secret file is unreadable
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

import structlog

from spn2 import APIClient, CaptureError, CapturePending, SPN2Error
from spn2.config import SPN2_POLL_INTERVAL, get_settings
from spn2.logging_config import configure_logging

logger = structlog.get_logger("spn2.scripts.capture_url")


async def run(access_key: str, secret: str, url: str) -> int:
    async with APIClient(access_key, secret, timeout=5.0) as client:
        logger.info("user_status", status=(await client.get_user_status()).model_dump())

        capture = await client.request_capture(url)
        logger.info("capture_requested", job_id=capture.job_id, url=capture.url)
        logger.info("user_status", status=(await client.get_user_status()).model_dump())

        while True:
            status = await client.get_capture_status(capture.job_id)
            if isinstance(status, CapturePending):
                logger.info("capture_pending", resources=status.resources)
                await asyncio.sleep(SPN2_POLL_INTERVAL)
                continue
            break

        if isinstance(status, CaptureError):
            logger.error("capture_failed", **status.model_dump())
            exit_code = 1
        else:
            logger.info("capture_succeeded", archive_url=status.archive_url, **status.model_dump())
            exit_code = 0

        logger.info("user_status", status=(await client.get_user_status()).model_dump())
        system_status = await client.get_system_status()
        logger.info("system_status", **system_status.model_dump())
        return exit_code


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("access_key")
    parser.add_argument("secret_file", type=Path)
    parser.add_argument("url")
    parser.add_argument(
        "--log-level",
        default=get_settings().log_level,
        help="Logging verbosity (default: SPN2_LOG_LEVEL or INFO).",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    configure_logging(args.log_level)
    try:
        secret = args.secret_file.read_text(encoding="utf-8").strip()
    except OSError as exc:
        logger.error("secret_file_unreadable", path=str(args.secret_file), error=str(exc))
        return 1
    try:
        return asyncio.run(run(args.access_key, secret, args.url))
    except SPN2Error as exc:
        logger.error("spn2_error", error=str(exc), error_type=type(exc).__name__)
        return 1


if __name__ == "__main__":
    sys.exit(main())
