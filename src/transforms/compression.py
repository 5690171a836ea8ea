"""Streaming gzip compression stage.

This module wraps a byte stream in a single gzip member without
buffering the whole payload. The effort level trades CPU for size.
"""

from __future__ import annotations

from typing import Iterable, Iterator
import zlib

from core.constants import DEFAULT_COMPRESSION_LEVEL, MAX_COMPRESSION_LEVEL, MIN_COMPRESSION_LEVEL
from core.errors import TablecastCompressionError

_GZIP_WBITS = 16 + zlib.MAX_WBITS


class GzipCompressor:
    """Incremental gzip encoder."""

    def __init__(self, level: int = DEFAULT_COMPRESSION_LEVEL) -> None:
        if not MIN_COMPRESSION_LEVEL <= level <= MAX_COMPRESSION_LEVEL:
            raise TablecastCompressionError(
                f"Unsupported gzip compression level {level}: expected "
                f"[{MIN_COMPRESSION_LEVEL}, {MAX_COMPRESSION_LEVEL}]."
            )
        self._encoder = zlib.compressobj(level, zlib.DEFLATED, _GZIP_WBITS)
        self._finished = False

    def compress(self, chunk: bytes) -> bytes:
        """Feed one chunk and return any compressed bytes ready so far."""
        if self._finished:
            raise TablecastCompressionError("Gzip encoder received data after it was flushed.")
        try:
            return self._encoder.compress(chunk)
        except zlib.error as error:
            raise TablecastCompressionError(f"Gzip encoder failed: {error}.") from error

    def flush(self) -> bytes:
        """Finish the gzip member and return the trailing bytes."""
        self._finished = True
        try:
            return self._encoder.flush(zlib.Z_FINISH)
        except zlib.error as error:
            raise TablecastCompressionError(f"Gzip encoder failed to finish: {error}.") from error


def compress_stream(
    chunks: Iterable[bytes],
    level: int = DEFAULT_COMPRESSION_LEVEL,
) -> Iterator[bytes]:
    """Lazily gzip a chunk stream.

    Args:
        chunks: Uncompressed chunks in order.
        level: Gzip effort level.

    Yields:
        Non-empty compressed chunks; together they form one gzip member.
    """
    compressor = GzipCompressor(level)
    for chunk in chunks:
        compressed = compressor.compress(chunk)
        if compressed:
            yield compressed
    yield compressor.flush()
