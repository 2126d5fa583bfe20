"""Command-line interface for bunny-storage.

Commands:
    - list: List files directly under the storage zone root
    - get: Download an object to a file or stdout
    - put: Upload a local file
    - delete: Delete an object

Credentials default to the BUNNY_STORAGE_ACCESS_KEY and
BUNNY_STORAGE_STORAGE_ZONE environment variables. Any status other than 2xx
exits with code 1.
"""

import asyncio
import sys
from typing import Annotated, Optional

import typer

from . import __version__
from .core.config import settings
from .core.exceptions import BunnyStorageError
from .objectstorage import StorageClient, is_success
from .objectstorage.results import Status

app = typer.Typer(
    name="bunny-storage",
    help="Streaming client for BunnyCDN edge storage zones.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Display version information."""
    if value:
        typer.echo(f"bunny-storage {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=version_callback, help="Show version."),
    ] = None,
) -> None:
    """
    Bunny-Storage: list, get, put and delete objects in a storage zone.
    """
    pass


AccessKeyOption = Annotated[
    Optional[str],
    typer.Option("--access-key", "-k", help="Storage zone access key"),
]
ZoneOption = Annotated[
    Optional[str],
    typer.Option("--zone", "-z", help="Storage zone name"),
]
AutoEncodeOption = Annotated[
    Optional[bool],
    typer.Option(
        "--auto-encode/--no-auto-encode",
        help="Percent-encode object names (disable to use virtual folders)",
    ),
]
TimeoutOption = Annotated[
    Optional[float], typer.Option("--timeout", help="Request timeout in seconds")
]
EndpointOption = Annotated[
    Optional[str], typer.Option("--endpoint", help="Storage API endpoint")
]


def _create_client(
    access_key: Optional[str],
    zone: Optional[str],
    auto_encode: Optional[bool],
    timeout: Optional[float],
    endpoint: Optional[str],
) -> StorageClient:
    """Create a storage client from options, falling back to settings."""
    access_key = access_key or settings.access_key
    zone = zone or settings.storage_zone
    if not access_key or not zone:
        raise ValueError(
            "An access key and storage zone are required (--access-key/--zone or "
            "BUNNY_STORAGE_ACCESS_KEY/BUNNY_STORAGE_STORAGE_ZONE)"
        )

    return StorageClient(
        access_key,
        zone,
        auto_encode_filenames=auto_encode,
        timeout=timeout,
        endpoint=endpoint,
    )


def _report(status: Status) -> None:
    """Echo the status and exit non-zero unless it is a success."""
    phrase = getattr(status, "phrase", "")
    typer.echo(f"Status: {int(status)} {phrase}".rstrip(), err=True)
    if not is_success(status):
        raise typer.Exit(1)


@app.command("list")
def list_cmd(
    access_key: AccessKeyOption = None,
    zone: ZoneOption = None,
    auto_encode: AutoEncodeOption = None,
    timeout: TimeoutOption = None,
    endpoint: EndpointOption = None,
) -> None:
    """
    List files directly under the storage zone root.

    Example:
        bunny-storage list --zone my-zone --access-key KEY
    """

    async def run():
        async with _create_client(
            access_key, zone, auto_encode, timeout, endpoint
        ) as client:
            return await client.list_files()

    try:
        result = asyncio.run(run())
    except (BunnyStorageError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    for item in sorted(result.files, key=lambda f: f.object_name):
        kind = "dir " if item.is_directory else "file"
        changed = item.last_changed.isoformat() if item.last_changed else "-"
        typer.echo(f"{kind}  {item.length:>12,}  {changed}  {item.object_name}")
    _report(result.status_code)


@app.command("get")
def get_cmd(
    name: Annotated[str, typer.Argument(help="Object name to download")],
    output: Annotated[
        Optional[str],
        typer.Option("--output", "-o", help="File to write (default: stdout)"),
    ] = None,
    access_key: AccessKeyOption = None,
    zone: ZoneOption = None,
    auto_encode: AutoEncodeOption = None,
    timeout: TimeoutOption = None,
    endpoint: EndpointOption = None,
) -> None:
    """
    Download an object.

    Examples:
        bunny-storage get report.pdf -o report.pdf
        bunny-storage get notes.txt --zone my-zone > notes.txt
    """

    async def run(destination):
        async with _create_client(
            access_key, zone, auto_encode, timeout, endpoint
        ) as client:
            return await client.download_file(name, destination)

    try:
        if output:
            with open(output, "wb") as destination:
                status = asyncio.run(run(destination))
        else:
            status = asyncio.run(run(sys.stdout.buffer))
    except (BunnyStorageError, ValueError, OSError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    _report(status)


@app.command("put")
def put_cmd(
    name: Annotated[str, typer.Argument(help="Object name to upload to")],
    path: Annotated[str, typer.Argument(help="Local file to upload")],
    offset: Annotated[
        int, typer.Option("--offset", help="Byte offset to start reading from")
    ] = 0,
    access_key: AccessKeyOption = None,
    zone: ZoneOption = None,
    auto_encode: AutoEncodeOption = None,
    timeout: TimeoutOption = None,
    endpoint: EndpointOption = None,
) -> None:
    """
    Upload a local file, overwriting any object with the same name.

    Example:
        bunny-storage put backups/db.sql ./db.sql --no-auto-encode
    """

    async def run(source):
        async with _create_client(
            access_key, zone, auto_encode, timeout, endpoint
        ) as client:
            return await client.put_file(name, source, offset=offset)

    try:
        with open(path, "rb") as source:
            status = asyncio.run(run(source))
    except (BunnyStorageError, ValueError, OSError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    _report(status)


@app.command("delete")
def delete_cmd(
    name: Annotated[str, typer.Argument(help="Object name to delete")],
    access_key: AccessKeyOption = None,
    zone: ZoneOption = None,
    auto_encode: AutoEncodeOption = None,
    timeout: TimeoutOption = None,
    endpoint: EndpointOption = None,
) -> None:
    """
    Delete an object.

    Example:
        bunny-storage delete old.txt --zone my-zone
    """

    async def run():
        async with _create_client(
            access_key, zone, auto_encode, timeout, endpoint
        ) as client:
            return await client.delete_file(name)

    try:
        status = asyncio.run(run())
    except (BunnyStorageError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    _report(status)


if __name__ == "__main__":
    app()
