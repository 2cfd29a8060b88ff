"""CLI entry point for the S3 file store.

This module provides a command-line interface to inspect and operate the
configured bucket. Connection settings come from the environment (or .env).

Usage:
    python -m s3filestore health
    python -m s3filestore put <file> [--mime-type image/png]
    python -m s3filestore get <key> [--output path]
    python -m s3filestore head <key>
    python -m s3filestore delete <key>
    python -m s3filestore ls [--prefix 2024/]
    python -m s3filestore resolve "{code}/{YYYY}/{MM}/{UUID}"

Examples:
    S3_URL=http://localhost:9000 S3_BUCKET=files python -m s3filestore health
"""

import json
import mimetypes
import sys
from pathlib import Path
from typing import Optional

import click
from loguru import logger
from pydantic import ValidationError

from s3filestore import __version__
from s3filestore.core.config import Settings
from s3filestore.storage.adapter import S3StorageAdapter
from s3filestore.storage.errors import StorageError
from s3filestore.util.path_template import resolve


def _local_name(title: str, key: str) -> str:
    """Return a bare file name for a download, never a path."""
    for candidate in (title, key):
        name = Path(candidate).name
        if name not in ("", ".", ".."):
            return name
    return "download"


def _load_adapter(ctx: click.Context) -> S3StorageAdapter:
    settings: Settings = ctx.obj["settings"]
    return S3StorageAdapter.from_settings(settings)


def _fail(error: StorageError) -> None:
    click.echo(f"Error: {error.kind.value} (status {error.status_code}): {error}", err=True)
    sys.exit(1)


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """S3 file store - store and fetch files in an S3-compatible bucket."""
    try:
        settings = Settings()
    except ValidationError as e:
        raise click.ClickException(f"Invalid configuration: {e}")

    logger.remove()
    logger.add(sys.stderr, level=settings.log_level)

    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


@cli.command()
@click.pass_context
def health(ctx: click.Context) -> None:
    """Check that the bucket is reachable."""
    adapter = _load_adapter(ctx)
    if adapter.health_check():
        click.echo(f"{adapter.name}: healthy")
    else:
        click.echo(f"{adapter.name}: unhealthy", err=True)
        sys.exit(1)


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--mime-type", "-m", default=None, help="MIME type (default: guessed from name)")
@click.pass_context
def put(ctx: click.Context, file: Path, mime_type: Optional[str]) -> None:
    """Store a local file and print its storage key."""
    adapter = _load_adapter(ctx)
    if mime_type is None:
        mime_type, _ = mimetypes.guess_type(str(file))

    try:
        with open(file, "rb") as f:
            key = adapter.store_named_file(file.name, file.stat().st_size, mime_type, f)
    except StorageError as e:
        _fail(e)
        return

    click.echo(key)


@cli.command()
@click.argument("key")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Destination file (default: the stored title)",
)
@click.pass_context
def get(ctx: click.Context, key: str, output: Optional[Path]) -> None:
    """Download a file."""
    adapter = _load_adapter(ctx)
    try:
        stored_file = adapter.get_file(key)
    except StorageError as e:
        _fail(e)
        return

    if stored_file is None:
        click.echo(f"Not found: {key}", err=True)
        sys.exit(1)

    destination = output or Path(_local_name(stored_file.title, key))
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_bytes(stored_file.content or b"")
    click.echo(f"Saved {stored_file.size} bytes to {destination}")


@cli.command()
@click.argument("key")
@click.pass_context
def head(ctx: click.Context, key: str) -> None:
    """Print the metadata of a file as JSON."""
    adapter = _load_adapter(ctx)
    try:
        stored_file = adapter.get_file_metadata(key)
    except StorageError as e:
        _fail(e)
        return

    if stored_file is None:
        click.echo(f"Not found: {key}", err=True)
        sys.exit(1)

    click.echo(json.dumps(stored_file.to_dict(), indent=2))


@cli.command()
@click.argument("key")
@click.pass_context
def delete(ctx: click.Context, key: str) -> None:
    """Delete a file."""
    adapter = _load_adapter(ctx)
    try:
        adapter.delete(key)
    except StorageError as e:
        _fail(e)
        return

    click.echo(f"Deleted {key}")


@cli.command(name="ls")
@click.option("--prefix", "-p", default="", help="Only list keys starting with this prefix")
@click.option("--limit", "-l", type=int, default=100, help="Maximum number of keys")
@click.pass_context
def list_keys(ctx: click.Context, prefix: str, limit: int) -> None:
    """List stored keys."""
    adapter = _load_adapter(ctx)
    try:
        keys = adapter.list_keys(prefix=prefix, limit=limit)
    except StorageError as e:
        _fail(e)
        return

    for key in keys:
        click.echo(key)


@cli.command(name="resolve")
@click.argument("pattern", required=False)
@click.pass_context
def resolve_pattern(ctx: click.Context, pattern: Optional[str]) -> None:
    """Show the key a path template resolves to right now."""
    settings: Settings = ctx.obj["settings"]
    click.echo(resolve(pattern or settings.default_file_path, settings.site_code))


@cli.command()
def version() -> None:
    """Show version information."""
    click.echo(f"s3filestore v{__version__}")
    click.echo("S3-compatible file store adapter")


if __name__ == "__main__":
    cli()
