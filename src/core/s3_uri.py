"""S3 URI parsing helpers.

This module centralizes parsing of ``s3://`` export destinations.
It keeps URI validation behavior consistent between CLI and SDK.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.constants import DEFAULT_KEY_PREFIX
from core.errors import TablecastConfigError


@dataclass(frozen=True)
class S3Location:
    """Parsed S3 location model."""

    bucket: str
    prefix: str


def parse_s3_uri(uri: str, default_prefix: str = DEFAULT_KEY_PREFIX) -> S3Location:
    """Parse and validate an S3 destination URI.

    Args:
        uri: URI in format ``s3://bucket`` or ``s3://bucket/prefix``.
        default_prefix: Prefix used when the URI names only a bucket.

    Returns:
        Parsed bucket and prefix pair.

    Raises:
        TablecastConfigError: If the URI is malformed.
    """
    if not uri.startswith("s3://"):
        _raise_uri_error(uri)
    stripped_uri = uri.removeprefix("s3://")
    bucket, _, prefix = stripped_uri.partition("/")
    if not bucket:
        _raise_uri_error(uri)
    prefix = prefix.strip("/") or default_prefix
    return S3Location(bucket=bucket, prefix=prefix)


def _raise_uri_error(uri: str) -> None:
    """Raise an invalid destination URI error.

    Args:
        uri: Invalid URI value.

    Raises:
        TablecastConfigError: Always.
    """
    raise TablecastConfigError(
        f"Invalid S3 URI '{uri}': expected s3://bucket or s3://bucket/prefix. "
        "Provide at least a bucket name."
    )
