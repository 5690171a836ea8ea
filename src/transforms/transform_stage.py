"""Streaming CSV transform stage.

This module composes the row reassembler and cell rewriter into a
byte-stream-in, byte-stream-out stage. Output is produced per chunk so
memory stays bounded regardless of table size.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Literal

from core.constants import FIELD_SEPARATOR, RECORD_TERMINATOR, TEXT_ENCODING
from core.errors import TablecastTransformError
from core.types import Record
from transforms.cell_rewriter import CellRewriter
from transforms.row_reassembler import RowReassembler

TransformState = Literal["awaiting_header", "streaming"]


class TransformStage:
    """Rewrite every data record of a CSV byte stream."""

    def __init__(
        self,
        rewriter: CellRewriter | None = None,
        separator: str = FIELD_SEPARATOR,
        terminator: bytes = RECORD_TERMINATOR,
        encoding: str = TEXT_ENCODING,
    ) -> None:
        self._rewriter = rewriter or CellRewriter()
        self._separator = separator
        self._terminator = terminator
        self._encoding = encoding
        self._reassembler = RowReassembler(separator, terminator, encoding)
        self._records_processed = 0

    @property
    def state(self) -> TransformState:
        """Return ``awaiting_header`` until the first record is emitted."""
        return "awaiting_header" if self._reassembler.header_pending else "streaming"

    @property
    def records_processed(self) -> int:
        """Return the number of non-header records emitted so far."""
        return self._records_processed

    def process(self, chunk: bytes) -> bytes:
        """Transform one input chunk.

        Args:
            chunk: Raw source bytes.

        Returns:
            Serialized output for every record the chunk completed.
        """
        return self._serialize_all(self._reassembler.feed(chunk))

    def finish(self) -> bytes:
        """Flush the trailing fragment at end of input.

        Returns:
            Serialized final record, or empty bytes.
        """
        return self._serialize_all(self._reassembler.flush())

    def _serialize_all(self, records: list[Record]) -> bytes:
        return b"".join(self._serialize(self._rewriter.rewrite(record)) for record in records)

    def _serialize(self, record: Record) -> bytes:
        if not record.is_header:
            self._records_processed += 1
        line = self._separator.join(record.fields)
        try:
            return line.encode(self._encoding) + self._terminator
        except UnicodeEncodeError as error:
            raise TablecastTransformError(
                f"Failed to encode rewritten row as {self._encoding}: {error}. "
                "Use a marker representable in the output encoding."
            ) from error


def transform_stream(chunks: Iterable[bytes], stage: TransformStage) -> Iterator[bytes]:
    """Lazily transform a chunk stream.

    Args:
        chunks: Ordered source chunks.
        stage: Transform stage holding reassembly state.

    Yields:
        Non-empty transformed output chunks in source order.
    """
    for chunk in chunks:
        output = stage.process(chunk)
        if output:
            yield output
    tail = stage.finish()
    if tail:
        yield tail
