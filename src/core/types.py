"""Shared typed models.

This module defines immutable data models used by transforms,
the export pipeline, the SDK client, and the CLI.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.constants import (
    DEFAULT_CELL_MARKER,
    DEFAULT_CHANNEL_CAPACITY_BYTES,
    DEFAULT_COMPRESSION_LEVEL,
    DEFAULT_KEY_PREFIX,
)


@dataclass(frozen=True)
class Record:
    """One logical row of table data.

    Attributes:
        fields: Ordered field values.
        is_header: Whether this is the stream's header record.
    """

    fields: tuple[str, ...]
    is_header: bool = False


@dataclass(frozen=True)
class ExportOptions:
    """Options for one table export run.

    Attributes:
        table_name: Source table, optionally schema-qualified.
        key_prefix: Destination key prefix.
        compress: Whether to gzip the transformed stream.
        compression_level: Gzip effort level in [0, 9].
        cell_marker: Prefix applied to non-empty data cells.
        channel_capacity_bytes: Bound on bytes buffered ahead of the uploader.
    """

    table_name: str
    key_prefix: str = DEFAULT_KEY_PREFIX
    compress: bool = False
    compression_level: int = DEFAULT_COMPRESSION_LEVEL
    cell_marker: str = DEFAULT_CELL_MARKER
    channel_capacity_bytes: int = DEFAULT_CHANNEL_CAPACITY_BYTES


@dataclass(frozen=True)
class ExportDestination:
    """Generated destination object key and its HTTP metadata."""

    key: str
    content_type: str
    content_encoding: str | None


@dataclass(frozen=True)
class ExportResult:
    """Outcome of a successful export.

    Attributes:
        destination_key: Object key written by the uploader.
        content_type: Declared content type.
        content_encoding: Declared content encoding, if compressed.
        record_count: Non-header records processed.
        bytes_uploaded: Bytes handed to the uploader.
        compressed: Whether the body was gzip-compressed.
    """

    destination_key: str
    content_type: str
    content_encoding: str | None
    record_count: int
    bytes_uploaded: int
    compressed: bool
