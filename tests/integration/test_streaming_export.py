"""Integration test: large table export through every pipeline stage."""

from __future__ import annotations

import gzip
import random
from dataclasses import replace

from core.config import TablecastConfig
from pipeline.export_client import TablecastClient


class _StreamingS3Client:
    """boto3 double that consumes the body in multipart-sized reads."""

    def __init__(self, part_size: int) -> None:
        self._part_size = part_size
        self.parts: list[bytes] = []
        self.key: str | None = None

    def upload_fileobj(self, Fileobj, Bucket, Key, ExtraArgs=None, Config=None) -> None:
        self.key = Key
        while True:
            part = Fileobj.read(self._part_size)
            if not part:
                return
            self.parts.append(part)


def _table_chunks(row_count: int, seed: int) -> tuple[list[bytes], bytes]:
    rows = ["id,name,comment"] + [
        f"{index},user-{index},{'' if index % 3 == 0 else 'note'}" for index in range(row_count)
    ]
    payload = ("\n".join(rows) + "\n").encode("utf-8")
    rng = random.Random(seed)
    chunks: list[bytes] = []
    position = 0
    while position < len(payload):
        size = rng.randint(1, 97)
        chunks.append(payload[position : position + size])
        position += size
    expected_rows = [rows[0]] + [
        ",".join(value if not value.strip() else f"x-{value}" for value in row.split(","))
        for row in rows[1:]
    ]
    return chunks, ("\n".join(expected_rows) + "\n").encode("utf-8")


def test_compressed_export_of_randomly_chunked_table(make_source) -> None:
    """Random chunking, gzip, and part-sized reads should round-trip exactly."""
    chunks, expected = _table_chunks(row_count=5000, seed=7)
    source = make_source(chunks)
    s3_client = _StreamingS3Client(part_size=1024)
    config = replace(
        TablecastConfig.from_env(),
        s3_bucket="large-table-etl-demo",
        compress=True,
        compression_level=6,
        cell_marker="x-",
        channel_capacity_bytes=256,
    )
    client = TablecastClient(config, s3_client=s3_client, source_opener=lambda name: source)

    result = client.export_table("large_table")

    assert gzip.decompress(b"".join(s3_client.parts)) == expected
    assert all(len(part) == 1024 for part in s3_client.parts[:-1])
    assert result.record_count == 5000
    assert s3_client.key == result.destination_key
    assert source.close_calls == 1
