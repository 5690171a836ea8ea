"""Core constants used across Tablecast modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

FIELD_SEPARATOR = ","
RECORD_TERMINATOR = b"\n"
TEXT_ENCODING = "utf-8"
DEFAULT_CELL_MARKER = "x-"
DEFAULT_KEY_PREFIX = "exports"
CSV_CONTENT_TYPE = "text/csv"
CSV_FILE_SUFFIX = ".csv"
GZIP_CONTENT_ENCODING = "gzip"
GZIP_FILE_SUFFIX = ".gz"
DEFAULT_COMPRESSION_LEVEL = 6
MIN_COMPRESSION_LEVEL = 0
MAX_COMPRESSION_LEVEL = 9
DEFAULT_CHANNEL_CAPACITY_BYTES = 4 * 1024 * 1024
DEFAULT_MULTIPART_CHUNK_SIZE = 8 * 1024 * 1024
MIN_MULTIPART_CHUNK_SIZE = 5 * 1024 * 1024
