"""Chunk-to-record reassembly.

This module turns an ordered sequence of arbitrary byte chunks into
complete records. It holds the unterminated tail between calls and
classifies the first record of the stream as the header.
"""

from __future__ import annotations

from core.constants import FIELD_SEPARATOR, RECORD_TERMINATOR, TEXT_ENCODING
from core.errors import TablecastTransformError
from core.types import Record


class RowReassembler:
    """Stateful splitter that yields records across chunk boundaries.

    Splitting always runs on the accumulated buffer, so a chunk boundary
    inside a field, inside a terminator, or exactly on a record boundary
    all produce the same records. Quoted separators and terminators are
    not supported.
    """

    def __init__(
        self,
        separator: str = FIELD_SEPARATOR,
        terminator: bytes = RECORD_TERMINATOR,
        encoding: str = TEXT_ENCODING,
    ) -> None:
        if not separator or not terminator:
            raise TablecastTransformError(
                "Row reassembler requires a non-empty field separator and record terminator."
            )
        self._separator = separator
        self._terminator = terminator
        self._encoding = encoding
        self._fragment_parts: list[bytes] = []
        self._header_pending = True
        self._flushed = False

    @property
    def header_pending(self) -> bool:
        """Return whether the header record has not been emitted yet."""
        return self._header_pending

    @property
    def fragment(self) -> bytes:
        """Return the unterminated tail held for the next chunk."""
        return b"".join(self._fragment_parts)

    def feed(self, chunk: bytes) -> list[Record]:
        """Consume one chunk and return the records it completes.

        Args:
            chunk: Next bytes of the stream.

        Returns:
            Complete records in stream order, possibly empty.

        Raises:
            TablecastTransformError: If called after flush or decoding fails.
        """
        if self._flushed:
            raise TablecastTransformError(
                "Row reassembler received data after end of input was flushed."
            )
        if not chunk:
            return []
        if len(self._terminator) == 1 and self._terminator not in chunk:
            self._fragment_parts.append(chunk)
            return []
        self._fragment_parts.append(chunk)
        buffer = b"".join(self._fragment_parts)
        *complete_lines, fragment = buffer.split(self._terminator)
        self._fragment_parts = [fragment] if fragment else []
        return [self._build_record(line) for line in complete_lines]

    def flush(self) -> list[Record]:
        """Emit the trailing fragment as a final record at end of input.

        Returns:
            One record when a non-empty fragment remains, else nothing.
        """
        self._flushed = True
        fragment = self.fragment
        self._fragment_parts = []
        if not fragment:
            return []
        return [self._build_record(fragment)]

    def _build_record(self, line: bytes) -> Record:
        try:
            text = line.decode(self._encoding)
        except UnicodeDecodeError as error:
            raise TablecastTransformError(
                f"Failed to decode table row as {self._encoding}: {error}. "
                "Check the source client encoding."
            ) from error
        is_header = self._header_pending
        self._header_pending = False
        return Record(fields=tuple(text.split(self._separator)), is_header=is_header)
