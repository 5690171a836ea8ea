"""S3 streaming upload helpers for table exports.

This module encapsulates boto3 client creation and managed uploads of
unbounded, non-seekable byte streams. Retries and multipart handling are
delegated to boto3's transfer manager.
"""

from __future__ import annotations

from typing import Any, BinaryIO, Protocol

from core.config import TablecastConfig
from core.constants import DEFAULT_MULTIPART_CHUNK_SIZE
from core.errors import TablecastDependencyError
from core.logging_config import get_logger

_LOGGER = get_logger(__name__)


class StorageUploader(Protocol):
    """Destination contract required by the export pipeline."""

    def upload(
        self,
        destination_key: str,
        body: BinaryIO,
        content_type: str,
        content_encoding: str | None = None,
    ) -> None: ...


def create_s3_client(config: TablecastConfig) -> Any:
    """Create boto3 S3 client for exports.

    Args:
        config: Runtime config with optional session settings.

    Returns:
        Boto3 S3 client.

    Raises:
        TablecastDependencyError: If boto3 is missing.
    """
    try:
        import boto3
    except ImportError as error:
        raise TablecastDependencyError(
            "S3 export requires boto3, but it is not installed. "
            "Install boto3 to upload exports to s3:// destinations."
        ) from error
    session_kwargs: dict[str, str] = {}
    if config.s3_profile:
        session_kwargs["profile_name"] = config.s3_profile
    if config.s3_region:
        session_kwargs["region_name"] = config.s3_region
    session = boto3.session.Session(**session_kwargs)
    return session.client("s3")


class S3Uploader:
    """Stream a readable body into one S3 object."""

    def __init__(
        self,
        s3_client: Any,
        bucket: str,
        multipart_chunk_size: int = DEFAULT_MULTIPART_CHUNK_SIZE,
    ) -> None:
        self._s3_client = s3_client
        self._bucket = bucket
        self._multipart_chunk_size = multipart_chunk_size

    @property
    def bucket(self) -> str:
        return self._bucket

    def upload(
        self,
        destination_key: str,
        body: BinaryIO,
        content_type: str,
        content_encoding: str | None = None,
    ) -> None:
        """Upload ``body`` until end of stream and wait for completion.

        Args:
            destination_key: Object key in the configured bucket.
            body: Readable, possibly non-seekable byte stream.
            content_type: ``Content-Type`` stored with the object.
            content_encoding: Optional ``Content-Encoding``.

        Raises:
            Exception: Any boto3 failure; the pipeline reports it as a sink error.
        """
        extra_args = {"ContentType": content_type}
        if content_encoding:
            extra_args["ContentEncoding"] = content_encoding
        _LOGGER.info(
            "s3_upload_started",
            bucket=self._bucket,
            key=destination_key,
            content_type=content_type,
            content_encoding=content_encoding,
        )
        self._s3_client.upload_fileobj(
            body,
            self._bucket,
            destination_key,
            ExtraArgs=extra_args,
            Config=_build_transfer_config(self._multipart_chunk_size),
        )
        _LOGGER.info("s3_upload_completed", bucket=self._bucket, key=destination_key)


def _build_transfer_config(multipart_chunk_size: int) -> Any:
    """Build boto3 transfer settings for streamed multipart uploads.

    Args:
        multipart_chunk_size: Part size in bytes.

    Returns:
        Boto3 ``TransferConfig``.

    Raises:
        TablecastDependencyError: If boto3 is missing.
    """
    try:
        from boto3.s3.transfer import TransferConfig
    except ImportError as error:
        raise TablecastDependencyError(
            "S3 export requires boto3, but it is not installed. "
            "Install boto3 to upload exports to s3:// destinations."
        ) from error
    return TransferConfig(
        multipart_threshold=multipart_chunk_size,
        multipart_chunksize=multipart_chunk_size,
    )
