"""Runtime configuration model for Tablecast.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os

from core.constants import (
    DEFAULT_CELL_MARKER,
    DEFAULT_CHANNEL_CAPACITY_BYTES,
    DEFAULT_COMPRESSION_LEVEL,
    DEFAULT_KEY_PREFIX,
    DEFAULT_MULTIPART_CHUNK_SIZE,
    MAX_COMPRESSION_LEVEL,
    MIN_COMPRESSION_LEVEL,
    MIN_MULTIPART_CHUNK_SIZE,
)
from core.errors import TablecastConfigError

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off", "")


@dataclass(frozen=True)
class TablecastConfig:
    """Validated runtime configuration.

    Attributes:
        database_url: psycopg conninfo string; empty defers to libpq PG* vars.
        s3_bucket: Default destination bucket.
        s3_region: Optional default AWS region for S3 operations.
        s3_profile: Optional AWS profile for boto3 session initialization.
        key_prefix: Key prefix for generated export objects.
        compress: Whether exports are gzip-compressed by default.
        compression_level: Gzip effort level in [0, 9].
        cell_marker: Literal prefix applied to non-empty data cells.
        channel_capacity_bytes: Bound on bytes buffered between stages.
        multipart_chunk_size: S3 multipart part size in bytes.
    """

    database_url: str
    s3_bucket: str | None
    s3_region: str | None
    s3_profile: str | None
    key_prefix: str
    compress: bool
    compression_level: int
    cell_marker: str
    channel_capacity_bytes: int
    multipart_chunk_size: int

    @classmethod
    def from_env(cls) -> "TablecastConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            TablecastConfigError: If environment values are invalid.
        """
        compression_level = _parse_int(
            "TABLECAST_COMPRESSION_LEVEL",
            os.getenv("TABLECAST_COMPRESSION_LEVEL", str(DEFAULT_COMPRESSION_LEVEL)),
        )
        validate_compression_level(compression_level)
        channel_capacity = _parse_int(
            "TABLECAST_CHANNEL_CAPACITY",
            os.getenv("TABLECAST_CHANNEL_CAPACITY", str(DEFAULT_CHANNEL_CAPACITY_BYTES)),
        )
        if channel_capacity <= 0:
            raise TablecastConfigError(
                f"Invalid TABLECAST_CHANNEL_CAPACITY value: expected a positive byte count, "
                f"got {channel_capacity}."
            )
        multipart_chunk_size = _parse_int(
            "TABLECAST_MULTIPART_CHUNK_SIZE",
            os.getenv("TABLECAST_MULTIPART_CHUNK_SIZE", str(DEFAULT_MULTIPART_CHUNK_SIZE)),
        )
        if multipart_chunk_size < MIN_MULTIPART_CHUNK_SIZE:
            raise TablecastConfigError(
                "Invalid TABLECAST_MULTIPART_CHUNK_SIZE value: "
                f"S3 requires at least {MIN_MULTIPART_CHUNK_SIZE} bytes per part, "
                f"got {multipart_chunk_size}."
            )
        return cls(
            database_url=os.getenv("TABLECAST_DATABASE_URL", ""),
            s3_bucket=os.getenv("TABLECAST_S3_BUCKET") or None,
            s3_region=os.getenv("TABLECAST_S3_REGION") or None,
            s3_profile=os.getenv("TABLECAST_S3_PROFILE") or None,
            key_prefix=os.getenv("TABLECAST_KEY_PREFIX", DEFAULT_KEY_PREFIX),
            compress=_parse_bool("TABLECAST_COMPRESS", os.getenv("TABLECAST_COMPRESS", "false")),
            compression_level=compression_level,
            cell_marker=os.getenv("TABLECAST_CELL_MARKER", DEFAULT_CELL_MARKER),
            channel_capacity_bytes=channel_capacity,
            multipart_chunk_size=multipart_chunk_size,
        )


def validate_compression_level(level: int) -> None:
    """Validate a gzip effort level.

    Args:
        level: Requested compression level.

    Raises:
        TablecastConfigError: If level is outside the supported range.
    """
    if not MIN_COMPRESSION_LEVEL <= level <= MAX_COMPRESSION_LEVEL:
        raise TablecastConfigError(
            f"Invalid compression level {level}: expected an integer in "
            f"[{MIN_COMPRESSION_LEVEL}, {MAX_COMPRESSION_LEVEL}]."
        )


def _parse_int(variable: str, raw_value: str) -> int:
    """Parse an integer environment value.

    Args:
        variable: Environment variable name for error context.
        raw_value: Raw string from environment.

    Returns:
        Parsed integer.

    Raises:
        TablecastConfigError: If value cannot be parsed into int.
    """
    try:
        return int(raw_value)
    except ValueError as error:
        raise TablecastConfigError(
            f"Invalid {variable} value: "
            f"expected integer, got '{raw_value}'. "
            f"Set {variable} to a numeric value."
        ) from error


def _parse_bool(variable: str, raw_value: str) -> bool:
    """Parse a boolean environment flag."""
    normalized = raw_value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise TablecastConfigError(
        f"Invalid {variable} value: expected a boolean flag such as 'true' or 'false', "
        f"got '{raw_value}'."
    )
