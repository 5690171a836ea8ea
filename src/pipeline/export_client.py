"""Python SDK for table exports.

This module exposes a high-level client that builds the PostgreSQL
source and S3 uploader from configuration and runs export pipelines.
"""

from __future__ import annotations

from typing import Any, Callable

from core.config import TablecastConfig, validate_compression_level
from core.errors import TablecastConfigError
from core.types import ExportOptions, ExportResult
from pipeline.export_pipeline import ExportPipeline
from source.postgres_copy import RowSource, open_postgres_source
from store.s3_upload import S3Uploader, create_s3_client

SourceOpener = Callable[[str], RowSource]


class TablecastClient:
    """Primary SDK entry point for table exports."""

    def __init__(
        self,
        config: TablecastConfig | None = None,
        s3_client: Any | None = None,
        source_opener: SourceOpener | None = None,
    ) -> None:
        """Create SDK client.

        Args:
            config: Optional runtime configuration.
            s3_client: Optional prebuilt boto3 S3 client.
            source_opener: Optional factory opening a source for a table name.
        """
        self._config = config or TablecastConfig.from_env()
        self._s3_client = s3_client
        self._source_opener = source_opener

    @property
    def config(self) -> TablecastConfig:
        return self._config

    def export_table(
        self,
        table_name: str,
        bucket: str | None = None,
        key_prefix: str | None = None,
        compress: bool | None = None,
        compression_level: int | None = None,
        cell_marker: str | None = None,
    ) -> ExportResult:
        """Stream one table to S3, rewriting cells in transit.

        Unset arguments fall back to the client configuration.

        Args:
            table_name: Source table, optionally ``schema.table``.
            bucket: Destination bucket.
            key_prefix: Destination key prefix.
            compress: Whether to gzip the body.
            compression_level: Gzip effort level.
            cell_marker: Prefix applied to non-empty data cells.

        Returns:
            Result with the destination key and record count.

        Raises:
            TablecastConfigError: If no bucket is configured or options are invalid.
            TablecastPipelineError: If any pipeline stage fails.
        """
        options = self._build_options(
            table_name, key_prefix, compress, compression_level, cell_marker
        )
        uploader = S3Uploader(
            self._resolve_s3_client(),
            self._resolve_bucket(bucket),
            self._config.multipart_chunk_size,
        )
        pipeline = ExportPipeline(lambda: self._open_source(table_name), uploader, options)
        return pipeline.run()

    def _build_options(
        self,
        table_name: str,
        key_prefix: str | None,
        compress: bool | None,
        compression_level: int | None,
        cell_marker: str | None,
    ) -> ExportOptions:
        if not table_name:
            raise TablecastConfigError("Export requires a table name.")
        level = self._config.compression_level if compression_level is None else compression_level
        validate_compression_level(level)
        return ExportOptions(
            table_name=table_name,
            key_prefix=self._config.key_prefix if key_prefix is None else key_prefix,
            compress=self._config.compress if compress is None else compress,
            compression_level=level,
            cell_marker=self._config.cell_marker if cell_marker is None else cell_marker,
            channel_capacity_bytes=self._config.channel_capacity_bytes,
        )

    def _resolve_bucket(self, bucket: str | None) -> str:
        resolved = bucket or self._config.s3_bucket
        if not resolved:
            raise TablecastConfigError(
                "No destination bucket configured. "
                "Set TABLECAST_S3_BUCKET or pass a destination bucket."
            )
        return resolved

    def _resolve_s3_client(self) -> Any:
        if self._s3_client is None:
            self._s3_client = create_s3_client(self._config)
        return self._s3_client

    def _open_source(self, table_name: str) -> RowSource:
        if self._source_opener is not None:
            return self._source_opener(table_name)
        return open_postgres_source(self._config.database_url, table_name)
