"""Unit tests for the S3 streaming uploader."""

from __future__ import annotations

import io

import pytest

from core.config import TablecastConfig
from store.s3_upload import S3Uploader, create_s3_client


class _FakeS3Client:
    def __init__(self, error: Exception | None = None) -> None:
        self._error = error
        self.received: dict[str, object] = {}

    def upload_fileobj(self, Fileobj, Bucket, Key, ExtraArgs=None, Config=None) -> None:
        if self._error is not None:
            raise self._error
        self.received = {
            "body": Fileobj.read(),
            "bucket": Bucket,
            "key": Key,
            "extra_args": ExtraArgs,
            "chunksize": Config.multipart_chunksize,
        }


def test_upload_passes_content_metadata() -> None:
    """Content type and encoding should be forwarded as extra args."""
    s3_client = _FakeS3Client()
    uploader = S3Uploader(s3_client, "exports-bucket", multipart_chunk_size=6 * 1024 * 1024)

    uploader.upload("exports/t.csv.gz", io.BytesIO(b"payload"), "text/csv", "gzip")

    assert s3_client.received == {
        "body": b"payload",
        "bucket": "exports-bucket",
        "key": "exports/t.csv.gz",
        "extra_args": {"ContentType": "text/csv", "ContentEncoding": "gzip"},
        "chunksize": 6 * 1024 * 1024,
    }


def test_upload_omits_encoding_for_plain_csv() -> None:
    """Uncompressed uploads declare only a content type."""
    s3_client = _FakeS3Client()

    S3Uploader(s3_client, "bucket").upload("exports/t.csv", io.BytesIO(b"a\n"), "text/csv")

    assert s3_client.received["extra_args"] == {"ContentType": "text/csv"}


def test_upload_propagates_client_errors() -> None:
    """Storage failures are left for the pipeline to classify."""
    uploader = S3Uploader(_FakeS3Client(error=RuntimeError("SlowDown")), "bucket")

    with pytest.raises(RuntimeError):
        uploader.upload("exports/t.csv", io.BytesIO(b""), "text/csv")


def test_create_s3_client_uses_profile_and_region(monkeypatch: pytest.MonkeyPatch) -> None:
    """Session settings should come from config."""
    import boto3

    captured: dict[str, str] = {}

    class _Session:
        def __init__(self, **kwargs: str) -> None:
            captured.update(kwargs)

        def client(self, service_name: str) -> str:
            return f"client:{service_name}"

    monkeypatch.setattr(boto3.session, "Session", _Session)
    monkeypatch.setenv("TABLECAST_S3_REGION", "eu-west-1")
    monkeypatch.setenv("TABLECAST_S3_PROFILE", "exporter")

    client = create_s3_client(TablecastConfig.from_env())

    assert client == "client:s3"
    assert captured == {"profile_name": "exporter", "region_name": "eu-west-1"}
