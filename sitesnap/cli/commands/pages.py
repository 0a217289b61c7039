"""Pages command listing the saved pages of one snapshot."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from sitesnap.core.config import Settings
from sitesnap.core.errors import SnapshotNotFoundError
from sitesnap.services.snapshots import SnapshotBrowser


def pages_command(
    host: str = typer.Argument(..., help="Archived hostname"),
    snapshot_id: str = typer.Argument(..., help="Snapshot directory name"),
) -> None:
    """List the pages saved in SNAPSHOT_ID of HOST."""
    settings = Settings()
    console = Console()
    try:
        pages = SnapshotBrowser(settings.data_dir).list_pages(host, snapshot_id)
    except SnapshotNotFoundError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc

    table = Table(title=f"{host} @ {snapshot_id}")
    table.add_column("Path")
    table.add_column("File")
    table.add_column("Size", justify="right")
    for page in pages:
        table.add_row(page.display_path, page.path, str(page.size))
    console.print(table)
