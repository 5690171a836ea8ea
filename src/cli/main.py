"""Tablecast CLI entry points.
This module exposes the table export command.
It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from typing import Any, Sequence

from core.config import TablecastConfig
from core.errors import TablecastError
from core.s3_uri import parse_s3_uri
from pipeline.export_client import TablecastClient


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="tablecast",
        description="Stream PostgreSQL tables to S3 with per-cell rewriting",
    )
    parser.add_argument(
        "--database-url",
        help="Override TABLECAST_DATABASE_URL for this command",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_export_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Tablecast CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        client = _build_client(args.database_url)
        if args.command == "export":
            return _run_export_command(client, args)
    except TablecastError as error:
        print(f"export_error={error}")
        return 1
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_client(database_url: str | None) -> TablecastClient:
    """Build SDK client with optional database override.

    Args:
        database_url: Optional conninfo override.

    Returns:
        Configured SDK client.
    """
    config = TablecastConfig.from_env()
    if database_url:
        config = replace(config, database_url=database_url)
    return TablecastClient(config)


def _run_export_command(client: TablecastClient, args: argparse.Namespace) -> int:
    """Handle export command.

    Args:
        client: SDK client.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    bucket = args.bucket
    key_prefix = None
    if args.destination:
        location = parse_s3_uri(args.destination, client.config.key_prefix)
        bucket, key_prefix = location.bucket, location.prefix
    result = client.export_table(
        table_name=args.table,
        bucket=bucket,
        key_prefix=key_prefix,
        compress=args.compress,
        compression_level=args.compression_level,
        cell_marker=args.marker,
    )
    resolved_bucket = bucket or client.config.s3_bucket
    print(f"s3://{resolved_bucket}/{result.destination_key}")
    print(f"record_count={result.record_count}")
    return 0


def _add_export_command(subparsers: Any) -> None:
    """Register export subcommand."""
    parser = subparsers.add_parser("export", help="Export one table to S3 as CSV")
    parser.add_argument("table", help="Table name, optionally schema.table")
    parser.add_argument("--bucket", help="Destination bucket (overrides TABLECAST_S3_BUCKET)")
    parser.add_argument(
        "--destination",
        help="Destination s3://bucket/prefix (overrides --bucket and TABLECAST_KEY_PREFIX)",
    )
    parser.add_argument(
        "--compress",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Gzip the export (defaults to TABLECAST_COMPRESS)",
    )
    parser.add_argument(
        "--compression-level",
        type=int,
        help="Gzip effort level 0-9 (defaults to TABLECAST_COMPRESSION_LEVEL)",
    )
    parser.add_argument("--marker", help="Prefix for non-empty data cells")
