"""CLI for git-bin."""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn
from rich.table import Table

from .config import load_config, save_config
from .constants import CONFIG_FILE, GITBIN_DIR
from .context import ProjectContext
from .errors import GitBinError
from .models import ProgressCallback, StoreConfiguration
from .storage import BlobStore, make_blob_store
from .utils import humanize_size


app = typer.Typer(help="""\
Store large binary files in a remote object store (S3) while the
repository keeps only their keys. List, upload and download blobs.""")

console = Console()


@app.callback()
def main_options(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    """Configure logging for all commands."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@contextmanager
def report_errors() -> Iterator[None]:
    """Turn known errors into exit code 1 and anything else into exit code 2."""
    try:
        yield
    except typer.Exit:
        raise
    except GitBinError as e:
        console.print(f"[red]✗[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except Exception:
        console.print("[red]Uncaught exception, please report this bug![/red]")
        console.print_exception()
        raise typer.Exit(2)


@contextmanager
def transfer_progress(description: str) -> Iterator[ProgressCallback]:
    """Progress bar driven by percent-complete callbacks."""
    with Progress(
        TextColumn("{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task(escape(description), total=100)
        yield lambda percent: progress.update(task, completed=percent)


def require_project_context() -> ProjectContext:
    """Ensure project is initialized and return context.

    Raises:
        typer.Exit: If not in a project directory
    """
    try:
        return ProjectContext()
    except ValueError as e:
        console.print(f"[red]✗[/red] {e}")
        console.print()
        console.print("To initialize a new project, run:")
        console.print("  [cyan]git-bin init --bucket <name>[/cyan]")
        raise typer.Exit(1)


def open_store(ctx: ProjectContext) -> BlobStore:
    """Build the configured blob store for a project."""
    return make_blob_store(load_config(ctx), base_dir=ctx.root)


@app.command()
def init(
    bucket: str = typer.Option(..., "--bucket", help="Bucket name (directory path for --provider fs)"),
    region: str = typer.Option("us-east-1", "--region", help="S3 region system name"),
    provider: str = typer.Option("s3", "--provider", help="Remote provider: s3 or fs"),
    endpoint_url: Optional[str] = typer.Option(None, "--endpoint-url", help="S3-compatible endpoint"),
    insecure: bool = typer.Option(False, "--insecure", help="Use HTTP instead of HTTPS"),
    path: Optional[str] = typer.Argument(None, help="Project directory (default: current)"),
):
    """Initialize git-bin configuration.

    Credentials are not written to the config file; set GITBIN_ACCESS_KEY
    and GITBIN_SECRET_KEY in the environment.

    Examples:
        git-bin init --bucket my-binaries
        git-bin init --bucket ./remote --provider fs
    """
    target_dir = Path(path) if path else Path.cwd()
    if not target_dir.is_dir():
        console.print(f"[red]✗[/red] Directory not found: {target_dir}")
        raise typer.Exit(1)

    if ProjectContext.is_initialized(target_dir):
        console.print(f"[yellow]Already initialized:[/yellow] {target_dir / GITBIN_DIR}")
        raise typer.Exit(1)

    try:
        config = StoreConfiguration(
            provider=provider,
            bucket=bucket,
            region=region,
            endpoint_url=endpoint_url,
            secure=not insecure,
        )
    except ValidationError as e:
        console.print(f"[red]✗[/red] Invalid settings: {escape(str(e))}")
        raise typer.Exit(1)

    with report_errors():
        ctx = ProjectContext.init(target_dir)
        save_config(config, ctx)

    console.print(f"[green]✓[/green] Initialized git-bin in {ctx.storage_dir}")
    console.print(f"[dim]Config: {GITBIN_DIR}/{CONFIG_FILE} ({config.provider}://{config.bucket})[/dim]")


@app.command("ls")
def list_blobs():
    """List blobs stored in the remote."""
    ctx = require_project_context()

    with report_errors():
        store = open_store(ctx)
        with console.status("Listing remote blobs..."):
            blobs = store.list_blobs()

    if not blobs:
        console.print("[dim]No blobs in remote[/dim]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Key")
    table.add_column("Size", justify="right")
    for blob in blobs:
        table.add_row(escape(blob.name), humanize_size(blob.size))
    console.print(table)

    total = sum(blob.size for blob in blobs)
    console.print(f"[dim]{len(blobs)} blob(s), {humanize_size(total)}[/dim]")


@app.command()
def push(
    file: Path = typer.Argument(..., help="Local file to upload"),
    key: Optional[str] = typer.Option(None, "--key", help="Remote key (default: file name)"),
):
    """Upload a file to the remote.

    Examples:
        git-bin push assets/model.bin
        git-bin push assets/model.bin --key models/v2.bin
    """
    ctx = require_project_context()

    if not file.is_file():
        console.print(f"[red]✗[/red] File not found: {file}")
        raise typer.Exit(1)

    remote_key = key or file.name
    with report_errors():
        store = open_store(ctx)
        with transfer_progress(f"↑ {remote_key}") as on_progress:
            store.put_blob(file, remote_key, on_progress)

    console.print(f"[green]✓[/green] Uploaded {escape(remote_key)} ({humanize_size(file.stat().st_size)})")


@app.command()
def pull(
    key: str = typer.Argument(..., help="Remote key to download"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Destination path"),
):
    """Download a blob from the remote.

    Examples:
        git-bin pull models/v2.bin
        git-bin pull models/v2.bin -o assets/model.bin
    """
    ctx = require_project_context()
    dest = output or Path(Path(key).name)

    with report_errors():
        store = open_store(ctx)
        with transfer_progress(f"↓ {key}") as on_progress:
            data = store.get_blob(key, on_progress)
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(data)

    console.print(f"[green]✓[/green] Downloaded {escape(key)} → {dest} ({humanize_size(len(data))})")


def main():
    """Entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
