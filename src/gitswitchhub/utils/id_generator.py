"""Utility functions for generating identifiers and timestamps for records."""

from datetime import UTC, datetime

import shortuuid


def generate_id() -> str:
    """Generate an opaque record ID.

    Returns:
        str: Short URL-safe ID (22 characters)
    """
    return shortuuid.uuid()


def utc_now_rfc3339() -> str:
    """Current UTC time as a fixed-width RFC 3339 string.

    Microseconds are always included so string order matches time order.
    """
    return datetime.now(UTC).isoformat(timespec="microseconds")

