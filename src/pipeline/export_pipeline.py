"""Export orchestration for streaming table uploads.

This module wires the table source, transform and compression stages,
and the storage uploader into one concurrent chain. The producer runs in
a worker thread, the uploader in the caller's thread, and a bounded
channel between them provides backpressure and cancellation.
"""

from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Callable, Iterable

from core.errors import (
    TablecastError,
    TablecastPipelineError,
    TablecastSinkError,
    TablecastSourceError,
)
from core.logging_config import get_logger
from core.types import ExportDestination, ExportOptions, ExportResult
from pipeline.byte_channel import ByteChannel, ChannelCancelledError, ChannelReader
from pipeline.export_key import build_export_destination
from pipeline.pipeline_state import PipelineState, PipelineStateTracker
from pipeline.stage_chain import build_stage_chain
from source.postgres_copy import RowSource
from store.s3_upload import StorageUploader
from transforms.cell_rewriter import CellRewriter
from transforms.transform_stage import TransformStage

_LOGGER = get_logger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class _StageProducer:
    """Worker that pumps stage output into the channel."""

    def __init__(
        self,
        source_chunks: Iterable[bytes],
        transform_stage: TransformStage,
        compression_level: int | None,
        channel: ByteChannel,
        tracker: PipelineStateTracker,
    ) -> None:
        self._source_chunks = source_chunks
        self._transform_stage = transform_stage
        self._compression_level = compression_level
        self._channel = channel
        self._tracker = tracker
        self.error: TablecastError | None = None

    def run(self) -> None:
        chunks = build_stage_chain(
            self._source_chunks, self._transform_stage, self._compression_level
        )
        try:
            for chunk in chunks:
                self._channel.write(chunk)
            self._tracker.transition("draining")
            self._channel.close()
        except ChannelCancelledError:
            return
        except TablecastError as error:
            self.error = error
            self._channel.abort(error)
        except Exception as error:
            failure = TablecastPipelineError(f"Export producer failed unexpectedly: {error}")
            failure.__cause__ = error
            self.error = failure
            self._channel.abort(failure)
        finally:
            _close_iterator(self._source_chunks)


class ExportPipeline:
    """Run one table export from source to destination."""

    def __init__(
        self,
        source_factory: Callable[[], RowSource],
        uploader: StorageUploader,
        options: ExportOptions,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._source_factory = source_factory
        self._uploader = uploader
        self._options = options
        self._clock = clock
        self._tracker = PipelineStateTracker()
        self._error: TablecastError | None = None

    @property
    def state(self) -> PipelineState:
        """Return the current lifecycle state."""
        return self._tracker.state

    @property
    def error(self) -> TablecastError | None:
        """Return the error that failed the run, if any."""
        return self._error

    def run(self) -> ExportResult:
        """Execute the export and wait for the upload to complete.

        Returns:
            Export result carrying the destination key.

        Raises:
            TablecastSourceError: If the table cannot be read.
            TablecastTransformError: If rows cannot be rewritten.
            TablecastCompressionError: If the gzip encoder fails.
            TablecastSinkError: If the upload fails or ends early.
        """
        destination = build_export_destination(
            self._options.table_name,
            self._options.key_prefix,
            self._options.compress,
            self._clock(),
        )
        self._tracker.transition("running")
        _LOGGER.info(
            "export_started",
            table=self._options.table_name,
            key=destination.key,
            compress=self._options.compress,
        )
        try:
            source = self._open_source()
        except TablecastError as error:
            self._fail(error)
            raise
        try:
            result = self._stream(source, destination)
        except TablecastError as error:
            self._fail(error)
            raise
        except Exception as error:
            wrapped = TablecastPipelineError(f"Export pipeline failed unexpectedly: {error}")
            self._fail(wrapped)
            raise wrapped from error
        except BaseException:
            self._mark_failed()
            raise
        finally:
            self._release_source(source)
        self._tracker.transition("completed")
        _LOGGER.info(
            "export_completed",
            table=self._options.table_name,
            key=result.destination_key,
            record_count=result.record_count,
            bytes_uploaded=result.bytes_uploaded,
        )
        return result

    def _open_source(self) -> RowSource:
        try:
            return self._source_factory()
        except TablecastError:
            raise
        except Exception as error:
            raise TablecastSourceError(
                f"Failed to open source for table {self._options.table_name}: {error}"
            ) from error

    def _stream(self, source: RowSource, destination: ExportDestination) -> ExportResult:
        channel = ByteChannel(self._options.channel_capacity_bytes)
        transform_stage = TransformStage(CellRewriter(self._options.cell_marker))
        compression_level = self._options.compression_level if self._options.compress else None
        producer = _StageProducer(
            source.iter_chunks(), transform_stage, compression_level, channel, self._tracker
        )
        worker = threading.Thread(target=producer.run, name="tablecast-producer", daemon=True)
        worker.start()
        try:
            try:
                self._uploader.upload(
                    destination.key,
                    ChannelReader(channel),
                    destination.content_type,
                    destination.content_encoding,
                )
            finally:
                fully_consumed = channel.drained
                channel.cancel()
                worker.join()
        except Exception as error:
            if producer.error is not None:
                raise producer.error
            raise TablecastSinkError(
                f"Failed to upload export to {destination.key}: {error}. "
                "Check destination credentials and permissions."
            ) from error
        if producer.error is not None:
            raise producer.error
        if not fully_consumed:
            raise TablecastSinkError(
                f"Uploader returned before consuming the full export stream for {destination.key}."
            )
        return ExportResult(
            destination_key=destination.key,
            content_type=destination.content_type,
            content_encoding=destination.content_encoding,
            record_count=transform_stage.records_processed,
            bytes_uploaded=channel.bytes_read,
            compressed=compression_level is not None,
        )

    def _release_source(self, source: RowSource) -> None:
        try:
            source.close()
        except Exception as error:
            _LOGGER.warning(
                "export_source_release_failed",
                table=self._options.table_name,
                error=str(error),
            )
            return
        _LOGGER.info("export_source_released", table=self._options.table_name)

    def _fail(self, error: TablecastError) -> None:
        self._error = error
        self._mark_failed()
        _LOGGER.error(
            "export_failed",
            table=self._options.table_name,
            stage=getattr(error, "stage", "pipeline"),
            error=str(error),
        )

    def _mark_failed(self) -> None:
        if self._tracker.state != "failed":
            self._tracker.transition("failed")


def _close_iterator(chunks: Iterable[bytes]) -> None:
    """Close a generator-backed iterator so its cleanup runs on this thread."""
    close = getattr(chunks, "close", None)
    if callable(close):
        close()
