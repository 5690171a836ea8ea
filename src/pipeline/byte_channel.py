"""Bounded single-writer, single-reader byte channel.

The channel connects the producer thread to the uploader. Writers block
while the buffer is at capacity, readers block until data arrives, and
either side can terminate the other without leaving it blocked.
"""

from __future__ import annotations

from collections import deque
import io
import threading

from core.errors import TablecastError, TablecastPipelineError


class ChannelCancelledError(TablecastError):
    """Raised to a writer after the reader has abandoned the channel."""


class ByteChannel:
    """Thread-safe bounded byte pipe with close, abort, and cancel."""

    def __init__(self, capacity_bytes: int) -> None:
        if capacity_bytes <= 0:
            raise TablecastPipelineError(
                f"Channel capacity must be a positive byte count, got {capacity_bytes}."
            )
        self._capacity = capacity_bytes
        self._chunks: deque[bytes] = deque()
        self._buffered = 0
        self._condition = threading.Condition()
        self._closed = False
        self._cancelled = False
        self._error: BaseException | None = None
        self._bytes_written = 0
        self._bytes_read = 0

    @property
    def bytes_written(self) -> int:
        """Return total bytes accepted from the writer."""
        with self._condition:
            return self._bytes_written

    @property
    def bytes_read(self) -> int:
        """Return total bytes handed to the reader."""
        with self._condition:
            return self._bytes_read

    @property
    def drained(self) -> bool:
        """Return whether the writer closed and the reader consumed everything."""
        with self._condition:
            return self._closed and self._error is None and not self._chunks

    def write(self, chunk: bytes) -> None:
        """Append a chunk, blocking while the buffer is full.

        A chunk larger than the capacity is accepted once the buffer is empty.

        Raises:
            ChannelCancelledError: If the reader cancelled the channel.
            TablecastPipelineError: If the writer already closed or aborted.
        """
        if not chunk:
            return
        with self._condition:
            if self._closed or self._error is not None:
                raise TablecastPipelineError("Cannot write to a channel after it was closed.")
            while (
                not self._cancelled
                and self._buffered > 0
                and self._buffered + len(chunk) > self._capacity
            ):
                self._condition.wait()
            if self._cancelled:
                raise ChannelCancelledError("Channel reader cancelled; stopping producer.")
            self._chunks.append(bytes(chunk))
            self._buffered += len(chunk)
            self._bytes_written += len(chunk)
            self._condition.notify_all()

    def close(self) -> None:
        """Mark end of stream from the writer side."""
        with self._condition:
            self._closed = True
            self._condition.notify_all()

    def abort(self, error: BaseException) -> None:
        """Mark writer failure; pending and future reads raise ``error``."""
        with self._condition:
            self._error = error
            self._condition.notify_all()

    def cancel(self) -> None:
        """Mark the reader gone and release a blocked writer."""
        with self._condition:
            self._cancelled = True
            self._chunks.clear()
            self._buffered = 0
            self._condition.notify_all()

    def read(self, max_bytes: int = -1) -> bytes:
        """Return up to ``max_bytes`` bytes, blocking until available.

        Args:
            max_bytes: Upper bound on returned bytes; negative means one chunk.

        Returns:
            Buffered bytes, or ``b""`` once the writer closed and all data was read.

        Raises:
            BaseException: The writer's abort error.
        """
        if max_bytes == 0:
            return b""
        with self._condition:
            while not self._chunks and not self._closed and self._error is None:
                if self._cancelled:
                    return b""
                self._condition.wait()
            if self._error is not None:
                raise self._error
            if not self._chunks:
                return b""
            chunk = self._chunks.popleft()
            if 0 <= max_bytes < len(chunk):
                chunk, remainder = chunk[:max_bytes], chunk[max_bytes:]
                self._chunks.appendleft(remainder)
            self._buffered -= len(chunk)
            self._bytes_read += len(chunk)
            self._condition.notify_all()
            return chunk


class ChannelReader(io.RawIOBase):
    """Read-only file object over a byte channel for upload clients."""

    def __init__(self, channel: ByteChannel) -> None:
        super().__init__()
        self._channel = channel

    def readable(self) -> bool:
        return True

    def readinto(self, buffer: bytearray | memoryview) -> int:  # type: ignore[override]
        # Fill the whole buffer unless the stream ends; multipart uploads treat
        # a short read as a final part.
        view = memoryview(buffer).cast("B")
        filled = 0
        while filled < len(view):
            data = self._channel.read(len(view) - filled)
            if not data:
                break
            view[filled : filled + len(data)] = data
            filled += len(data)
        return filled
