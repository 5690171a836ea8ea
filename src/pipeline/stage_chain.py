"""Stage chain construction for table exports.

This module links the source, transform, and optional compression
stages into one lazy chunk iterator and tags failures with the stage
that raised them.
"""

from __future__ import annotations

from typing import Iterable, Iterator

from core.errors import (
    TablecastCompressionError,
    TablecastError,
    TablecastPipelineError,
    TablecastSourceError,
    TablecastTransformError,
)
from transforms.compression import compress_stream
from transforms.transform_stage import TransformStage, transform_stream


def guard_stage(
    chunks: Iterable[bytes],
    error_type: type[TablecastPipelineError],
    action: str,
) -> Iterator[bytes]:
    """Re-raise foreign errors from one stage as that stage's error type.

    Tablecast errors raised further upstream pass through unchanged so the
    originating stage stays visible.

    Args:
        chunks: Stage output iterator.
        error_type: Error class for this stage.
        action: Short description used in error messages.

    Yields:
        The stage's chunks unchanged.
    """
    iterator = iter(chunks)
    while True:
        try:
            chunk = next(iterator)
        except StopIteration:
            return
        except TablecastError:
            raise
        except Exception as error:
            raise error_type(f"Failed to {action}: {error}") from error
        yield chunk


def build_stage_chain(
    source_chunks: Iterable[bytes],
    transform_stage: TransformStage,
    compression_level: int | None,
) -> Iterator[bytes]:
    """Compose source, transform, and optional gzip stages.

    Args:
        source_chunks: Raw CSV chunks from the table source.
        transform_stage: Stage applying the cell rewrite.
        compression_level: Gzip level, or None to skip compression.

    Returns:
        Lazy iterator of upload-ready chunks.
    """
    chunks = guard_stage(source_chunks, TablecastSourceError, "read table data")
    chunks = guard_stage(
        transform_stream(chunks, transform_stage),
        TablecastTransformError,
        "transform table rows",
    )
    if compression_level is None:
        return chunks
    return guard_stage(
        compress_stream(chunks, compression_level),
        TablecastCompressionError,
        "compress export stream",
    )
