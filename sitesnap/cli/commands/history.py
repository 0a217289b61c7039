"""History command for a host's snapshot log."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from sitesnap.core.config import Settings
from sitesnap.services.metadata import MetadataRecorder


def history_command(host: str = typer.Argument(..., help="Archived hostname")) -> None:
    """Show every recorded snapshot of HOST, oldest first."""
    settings = Settings()
    console = Console()
    try:
        entries = MetadataRecorder(settings.data_dir).read(host)
    except ValueError as exc:
        console.print(f"[red]Unreadable metadata for {host}: {exc}[/red]")
        raise typer.Exit(code=1) from exc

    if not entries:
        console.print(f"No snapshots recorded for {host}")
        return

    table = Table(title=f"Snapshots of {host}")
    table.add_column("Snapshot")
    table.add_column("Source URL")
    table.add_column("Pages", justify="right")
    table.add_column("Assets", justify="right")
    table.add_column("Created")
    for entry in entries:
        table.add_row(
            entry.snapshot_id,
            entry.source_url,
            str(entry.page_count),
            str(entry.asset_count),
            entry.created_at,
        )
    console.print(table)
