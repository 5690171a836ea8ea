"""Tablecast exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each pipeline stage raises a specific error type so callers can tell
which part of an export failed.
"""

from __future__ import annotations


class TablecastError(Exception):
    """Base exception for all Tablecast failures."""


class TablecastConfigError(TablecastError):
    """Raised for invalid runtime configuration."""


class TablecastDependencyError(TablecastError):
    """Raised when an optional runtime dependency is missing."""


class TablecastPipelineError(TablecastError):
    """Raised for export orchestration failures."""

    stage = "pipeline"


class TablecastSourceError(TablecastPipelineError):
    """Raised when the table source cannot produce data."""

    stage = "source"


class TablecastTransformError(TablecastPipelineError):
    """Raised for row reassembly and cell rewrite failures."""

    stage = "transform"


class TablecastCompressionError(TablecastPipelineError):
    """Raised when the stream compressor fails."""

    stage = "compression"


class TablecastSinkError(TablecastPipelineError):
    """Raised when the destination upload fails."""

    stage = "sink"
