"""Unit tests for destination key generation."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from pipeline.export_key import build_export_destination, format_key_timestamp

MOMENT = datetime(2026, 10, 19, 8, 30, 15, 123456, tzinfo=timezone.utc)


def test_timestamp_replaces_colons_and_dots() -> None:
    """Keys should carry an ISO timestamp without ':' or '.'."""
    assert format_key_timestamp(MOMENT) == "2026-10-19T08-30-15-123Z"


def test_timestamp_normalizes_to_utc() -> None:
    """Offsets are converted to UTC before formatting."""
    local = MOMENT.astimezone(timezone(timedelta(hours=2)))

    assert format_key_timestamp(local) == "2026-10-19T08-30-15-123Z"


def test_plain_destination_is_csv() -> None:
    """Uncompressed exports use a .csv key without content encoding."""
    destination = build_export_destination("large_table", "exports", False, MOMENT)

    assert destination.key == "exports/large_table_2026-10-19T08-30-15-123Z.csv"
    assert destination.content_type == "text/csv"
    assert destination.content_encoding is None


def test_compressed_destination_declares_gzip() -> None:
    """Compressed exports get a .gz suffix and gzip content encoding."""
    destination = build_export_destination("large_table", "exports/", True, MOMENT)

    assert destination.key == "exports/large_table_2026-10-19T08-30-15-123Z.csv.gz"
    assert destination.content_encoding == "gzip"
