"""Unit tests for the per-cell rewrite rule."""

from __future__ import annotations

from core.types import Record
from transforms.cell_rewriter import CellRewriter, rewrite_cell


def test_rewrite_prefixes_non_empty_cells_only() -> None:
    """Blank and whitespace cells should stay as they are."""
    rewriter = CellRewriter(marker="x-")
    record = Record(fields=("1", "", "  ", " bob"))

    rewritten = rewriter.rewrite(record)

    assert rewritten.fields == ("x-1", "", "  ", "x- bob")


def test_rewrite_leaves_header_untouched() -> None:
    """Header records are passed through verbatim."""
    header = Record(fields=("id", "name"), is_header=True)

    assert CellRewriter().rewrite(header) is header


def test_rewrite_cell_uses_custom_marker() -> None:
    """The marker literal is configurable."""
    assert rewrite_cell("alice", "masked:") == "masked:alice"
