"""Archive command: run one snapshot job in the foreground."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.panel import Panel

from sitesnap.core.config import Settings
from sitesnap.core.errors import ValidationError
from sitesnap.core.logger import get_logger
from sitesnap.services.jobs import JobRegistry
from sitesnap.services.models import JobStatus, JobView

POLL_INTERVAL = 0.5


def archive_command(
    url: str = typer.Argument(..., help="Seed URL to archive"),
    max_pages: int | None = typer.Option(
        None, "-n", "--max-pages", help="Maximum pages to visit (default from settings)"
    ),
) -> None:
    """Archive URL and its same-host pages into a new snapshot."""
    settings = Settings()
    get_logger("sitesnap", log_level=settings.log_level, log_file=settings.log_file)
    console = Console()
    registry = JobRegistry(settings)

    try:
        view = asyncio.run(_run_archive(registry, url, max_pages, console))
    except ValidationError as exc:
        console.print(f"[red]Invalid request: {exc}[/red]")
        raise typer.Exit(code=1) from exc

    if view.status is JobStatus.COMPLETED and view.result is not None:
        snapshot_dir = registry.snapshot_dir(view.result.hostname, view.result.snapshot_id)
        panel = Panel(
            f"Host: {view.result.hostname}\n"
            f"Snapshot: {view.result.snapshot_id}\n"
            f"Pages: {view.result.page_count}\n"
            f"Assets: {view.result.asset_count}\n"
            f"Location: {snapshot_dir}",
            title="Archive Summary",
        )
        console.print(panel)
        return

    console.print(Panel(f"[red]{view.error}[/red]", title="Archive Failed"))
    raise typer.Exit(code=1)


async def _run_archive(
    registry: JobRegistry, url: str, max_pages: int | None, console: Console
) -> JobView:
    job_id = registry.submit(url, max_pages)
    console.print(f"Job ID: {job_id}")

    waiter = asyncio.ensure_future(registry.wait(job_id))
    with console.status("Starting archive...") as status:
        while not waiter.done():
            progress = registry.get_status(job_id).progress
            status.update(
                f"Archiving {progress.current_page_url or url} "
                f"({progress.pages_processed} pages, {progress.assets_downloaded} assets)"
            )
            await asyncio.wait({waiter}, timeout=POLL_INTERVAL)
    return waiter.result()
