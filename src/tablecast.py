"""Public SDK surface for Tablecast.

This module provides a stable import path for library users.
It re-exports the client, pipeline building blocks, and typed models.
"""

from __future__ import annotations

from core.config import TablecastConfig
from core.errors import (
    TablecastCompressionError,
    TablecastConfigError,
    TablecastError,
    TablecastPipelineError,
    TablecastSinkError,
    TablecastSourceError,
    TablecastTransformError,
)
from core.types import ExportOptions, ExportResult, Record
from pipeline.export_client import TablecastClient
from pipeline.export_pipeline import ExportPipeline
from source.postgres_copy import PostgresCopySource, RowSource
from store.s3_upload import S3Uploader, StorageUploader
from transforms.cell_rewriter import CellRewriter
from transforms.transform_stage import TransformStage, transform_stream

__all__ = [
    "CellRewriter",
    "ExportOptions",
    "ExportPipeline",
    "ExportResult",
    "PostgresCopySource",
    "Record",
    "RowSource",
    "S3Uploader",
    "StorageUploader",
    "TablecastClient",
    "TablecastCompressionError",
    "TablecastConfig",
    "TablecastConfigError",
    "TablecastError",
    "TablecastPipelineError",
    "TablecastSinkError",
    "TablecastSourceError",
    "TablecastTransformError",
    "TransformStage",
    "transform_stream",
]
