"""Pytest configuration for repository test runs."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, Iterator, Sequence

import pytest


def pytest_sessionstart() -> None:
    """Add src directory to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    src_path = project_root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


class FakeRowSource:
    """In-memory table source that counts releases."""

    def __init__(self, chunks: Sequence[bytes], error_after: int | None = None) -> None:
        self._chunks = list(chunks)
        self._error_after = error_after
        self.close_calls = 0
        self.chunks_served = 0

    def iter_chunks(self) -> Iterator[bytes]:
        for index, chunk in enumerate(self._chunks):
            if self._error_after is not None and index >= self._error_after:
                raise ConnectionError("server closed the connection unexpectedly")
            self.chunks_served += 1
            yield chunk
        if self._error_after is not None and self._error_after >= len(self._chunks):
            raise ConnectionError("server closed the connection unexpectedly")

    def close(self) -> None:
        self.close_calls += 1


class FakeUploader:
    """Uploader double that reads the body in fixed-size parts."""

    def __init__(
        self,
        part_size: int = 7,
        fail_after_bytes: int | None = None,
        stop_after_bytes: int | None = None,
    ) -> None:
        self._part_size = part_size
        self._fail_after_bytes = fail_after_bytes
        self._stop_after_bytes = stop_after_bytes
        self.body = b""
        self.destination_key: str | None = None
        self.content_type: str | None = None
        self.content_encoding: str | None = None

    def upload(self, destination_key, body, content_type, content_encoding=None) -> None:
        self.destination_key = destination_key
        self.content_type = content_type
        self.content_encoding = content_encoding
        while True:
            part = body.read(self._part_size)
            if not part:
                return
            self.body += part
            if self._fail_after_bytes is not None and len(self.body) >= self._fail_after_bytes:
                raise PermissionError("AccessDenied: upload rejected")
            if self._stop_after_bytes is not None and len(self.body) >= self._stop_after_bytes:
                return


@pytest.fixture
def make_source() -> Callable[..., FakeRowSource]:
    """Return a factory for in-memory table sources."""
    return FakeRowSource


@pytest.fixture
def make_uploader() -> Callable[..., FakeUploader]:
    """Return a factory for fake storage uploaders."""
    return FakeUploader


@pytest.fixture
def sample_csv() -> bytes:
    """Small table export with a header and a blank cell."""
    return b"id,name\n1,alice\n2,\n"
