"""Per-cell rewrite rule for data records.

Every non-empty data cell gets a fixed marker prefix. Header records and
blank cells pass through unchanged so absent values stay absent.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.constants import DEFAULT_CELL_MARKER
from core.types import Record


@dataclass(frozen=True)
class CellRewriter:
    """Pure record rewriter applying a literal marker prefix."""

    marker: str = DEFAULT_CELL_MARKER

    def rewrite(self, record: Record) -> Record:
        """Return the rewritten form of one record.

        Args:
            record: Record to rewrite.

        Returns:
            The header unchanged, or a new record with marked cells.
        """
        if record.is_header:
            return record
        return Record(
            fields=tuple(rewrite_cell(value, self.marker) for value in record.fields),
            is_header=False,
        )


def rewrite_cell(value: str, marker: str) -> str:
    """Prefix a cell with the marker unless it is blank."""
    if not value.strip():
        return value
    return f"{marker}{value}"
