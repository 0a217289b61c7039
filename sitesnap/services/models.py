"""Service-layer data models for archive jobs and snapshots."""

from __future__ import annotations

import secrets
import time
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from sitesnap.core.errors import JobStateError


class JobStatus(str, Enum):
    """Status values for archive job lifecycle tracking."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.COMPLETED, JobStatus.FAILED)


# Allowed forward transitions; anything else is a programming error
_TRANSITIONS: dict[JobStatus, set[JobStatus]] = {
    JobStatus.PENDING: {JobStatus.RUNNING, JobStatus.FAILED},
    JobStatus.RUNNING: {JobStatus.COMPLETED, JobStatus.FAILED},
    JobStatus.COMPLETED: set(),
    JobStatus.FAILED: set(),
}


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def isoformat_utc(moment: datetime) -> str:
    """Format a UTC datetime as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.") + (
        f"{moment.microsecond // 1000:03d}Z"
    )


def make_snapshot_id(moment: datetime | None = None) -> str:
    """Build a filesystem-safe snapshot id from a timestamp.

    Examples:
        >>> make_snapshot_id(datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc))
        '2024-01-15T10-30-00-000Z'
    """
    stamp = isoformat_utc(moment or utc_now())
    return stamp.replace(":", "-").replace(".", "-")


def generate_job_id() -> str:
    """Return a job id of the form ``job_<epoch-ms>_<8 hex digits>``."""
    return f"job_{int(time.time() * 1000)}_{secrets.token_hex(4)}"


@dataclass
class JobProgress:
    """Mutable crawl counters, written only by the owning traversal.

    Args:
        pages_processed: Pages taken from the worklist and marked visited
        assets_downloaded: Assets successfully saved under assets/
        current_page_url: URL of the page being processed
    """

    pages_processed: int = 0
    assets_downloaded: int = 0
    current_page_url: str | None = None


@dataclass(frozen=True)
class JobResult:
    """Summary of a completed archive run.

    Args:
        hostname: Archived host
        snapshot_id: Directory name of the snapshot under the host
        asset_count: Number of assets saved
        page_count: Number of pages visited
    """

    hostname: str
    snapshot_id: str
    asset_count: int
    page_count: int


@dataclass
class Job:
    """One archive run, owned by the JobRegistry."""

    id: str
    target_url: str
    hostname: str
    max_pages: int
    status: JobStatus = JobStatus.PENDING
    progress: JobProgress = field(default_factory=JobProgress)
    created_at: str = field(default_factory=lambda: isoformat_utc(utc_now()))
    started_at: str | None = None
    completed_at: str | None = None
    result: JobResult | None = None
    error: str | None = None

    def transition(self, status: JobStatus) -> None:
        """Move to ``status`` if the lifecycle allows it.

        Raises:
            JobStateError: On a backwards or repeated terminal transition
        """
        if status not in _TRANSITIONS[self.status]:
            raise JobStateError(
                f"Job {self.id} cannot move from {self.status.value} to {status.value}"
            )
        self.status = status

    def view(self) -> JobView:
        return JobView(
            id=self.id,
            target_url=self.target_url,
            hostname=self.hostname,
            max_pages=self.max_pages,
            status=self.status,
            progress=replace(self.progress),
            created_at=self.created_at,
            started_at=self.started_at,
            completed_at=self.completed_at,
            result=self.result,
            error=self.error,
        )


@dataclass(frozen=True)
class JobView:
    """Point-in-time copy of a job's fields handed to readers."""

    id: str
    target_url: str
    hostname: str
    max_pages: int
    status: JobStatus
    progress: JobProgress
    created_at: str
    started_at: str | None = None
    completed_at: str | None = None
    result: JobResult | None = None
    error: str | None = None


@dataclass(frozen=True)
class CrawlSummary:
    """Counters returned by a finished traversal.

    Args:
        page_count: Pages visited (size of the visited set)
        asset_count: Assets saved
        pages_saved: Pages actually written to disk
    """

    page_count: int
    asset_count: int
    pages_saved: int = 0


@dataclass(frozen=True)
class MetadataEntry:
    """One completed snapshot in a host's metadata log.

    Args:
        snapshot_id: Snapshot directory name
        source_url: Seed URL of the run
        asset_count: Number of assets saved
        page_count: Number of pages visited
        created_at: ISO-8601 completion timestamp
    """

    snapshot_id: str
    source_url: str
    asset_count: int
    page_count: int
    created_at: str

    def to_json(self) -> dict[str, Any]:
        return {
            "snapshotId": self.snapshot_id,
            "sourceUrl": self.source_url,
            "assetCount": self.asset_count,
            "pageCount": self.page_count,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> MetadataEntry:
        return cls(
            snapshot_id=data["snapshotId"],
            source_url=data["sourceUrl"],
            asset_count=int(data.get("assetCount", 0)),
            page_count=int(data.get("pageCount", 0)),
            created_at=data["createdAt"],
        )


@dataclass(frozen=True)
class HostSummary:
    """Latest-archive overview of one archived host."""

    host: str
    latest_archive: MetadataEntry
    total_archives: int
    first_archived: str
    last_archived: str


@dataclass(frozen=True)
class SnapshotPage:
    """A saved HTML page inside a snapshot.

    Args:
        path: Path relative to the snapshot directory (e.g. ``docs/intro.html``)
        display_path: Site path shown to users (``/`` for the root page)
        size: File size in bytes
        modified: ISO-8601 modification time
    """

    path: str
    display_path: str
    size: int
    modified: str


@dataclass(frozen=True)
class PageLink:
    href: str
    text: str


@dataclass(frozen=True)
class PageContent:
    """A saved page with its extracted title and outbound links."""

    path: str
    title: str
    content: str
    links: list[PageLink]
    size: int
