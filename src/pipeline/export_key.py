"""Destination key generation for table exports.

Keys look like ``exports/<table>_<timestamp>.csv`` with ``.gz`` appended
when the body is gzip-compressed.
"""

from __future__ import annotations

from datetime import datetime, timezone

from core.constants import (
    CSV_CONTENT_TYPE,
    CSV_FILE_SUFFIX,
    GZIP_CONTENT_ENCODING,
    GZIP_FILE_SUFFIX,
)
from core.types import ExportDestination


def format_key_timestamp(moment: datetime) -> str:
    """Render a UTC ISO-8601 timestamp safe for object keys.

    Args:
        moment: Timestamp; naive values are treated as UTC.

    Returns:
        Millisecond-precision timestamp with ``:`` and ``.`` replaced by ``-``.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    utc_moment = moment.astimezone(timezone.utc)
    iso_value = utc_moment.replace(tzinfo=None).isoformat(timespec="milliseconds") + "Z"
    return iso_value.replace(":", "-").replace(".", "-")


def build_export_destination(
    table_name: str,
    key_prefix: str,
    compressed: bool,
    moment: datetime,
) -> ExportDestination:
    """Build the destination key and HTTP metadata for one export.

    Args:
        table_name: Exported table name.
        key_prefix: Key prefix, without trailing slash.
        compressed: Whether the body is gzip-compressed.
        moment: Export start time.

    Returns:
        Destination key with content type and encoding.
    """
    key = f"{table_name}_{format_key_timestamp(moment)}{CSV_FILE_SUFFIX}"
    prefix = key_prefix.strip("/")
    if prefix:
        key = f"{prefix}/{key}"
    if not compressed:
        return ExportDestination(key=key, content_type=CSV_CONTENT_TYPE, content_encoding=None)
    return ExportDestination(
        key=f"{key}{GZIP_FILE_SUFFIX}",
        content_type=CSV_CONTENT_TYPE,
        content_encoding=GZIP_CONTENT_ENCODING,
    )
