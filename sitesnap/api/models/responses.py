"""Response models for API endpoints.

Pydantic models defining the structure of API responses. Field names are
snake_case in Python and camelCase on the wire.

Example:
    from sitesnap.api.models.responses import HealthResponse

    response = HealthResponse(status="healthy")
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from sitesnap.services.models import (
    HostSummary,
    JobView,
    MetadataEntry,
    PageContent,
    SnapshotPage,
)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class HealthResponse(BaseModel):
    """Health check response model.

    Attributes:
        status: Current health status ('healthy' or 'unhealthy')
        timestamp: ISO-8601 time of the check
    """

    status: str
    timestamp: str | None = None


class SubmitResponse(CamelModel):
    job_id: str
    status: str


class ProgressResponse(CamelModel):
    pages_processed: int
    assets_downloaded: int
    current_page_url: str | None = None


class ResultResponse(CamelModel):
    hostname: str
    snapshot_id: str
    asset_count: int
    page_count: int


class ActiveJobResponse(CamelModel):
    """Entry of ``GET /api/jobs``."""

    id: str
    url: str
    hostname: str
    status: str
    progress: ProgressResponse

    @classmethod
    def from_view(cls, view: JobView) -> ActiveJobResponse:
        return cls(
            id=view.id,
            url=view.target_url,
            hostname=view.hostname,
            status=view.status.value,
            progress=_progress(view),
        )


class JobStatusResponse(ActiveJobResponse):
    """Body of ``GET /api/jobs/{job_id}``.

    ``result`` is set only for completed jobs and ``error`` only for failed
    ones.
    """

    max_pages: int
    created_at: str
    started_at: str | None = None
    completed_at: str | None = None
    result: ResultResponse | None = None
    error: str | None = None

    @classmethod
    def from_view(cls, view: JobView) -> JobStatusResponse:
        result = None
        if view.result is not None:
            result = ResultResponse(
                hostname=view.result.hostname,
                snapshot_id=view.result.snapshot_id,
                asset_count=view.result.asset_count,
                page_count=view.result.page_count,
            )
        return cls(
            id=view.id,
            url=view.target_url,
            hostname=view.hostname,
            status=view.status.value,
            progress=_progress(view),
            max_pages=view.max_pages,
            created_at=view.created_at,
            started_at=view.started_at,
            completed_at=view.completed_at,
            result=result,
            error=view.error,
        )


class MetadataEntryResponse(CamelModel):
    snapshot_id: str
    source_url: str
    asset_count: int
    page_count: int
    created_at: str

    @classmethod
    def from_entry(cls, entry: MetadataEntry) -> MetadataEntryResponse:
        return cls(
            snapshot_id=entry.snapshot_id,
            source_url=entry.source_url,
            asset_count=entry.asset_count,
            page_count=entry.page_count,
            created_at=entry.created_at,
        )


class HostSummaryResponse(CamelModel):
    host: str
    latest_archive: MetadataEntryResponse
    total_archives: int
    first_archived: str
    last_archived: str

    @classmethod
    def from_summary(cls, summary: HostSummary) -> HostSummaryResponse:
        return cls(
            host=summary.host,
            latest_archive=MetadataEntryResponse.from_entry(summary.latest_archive),
            total_archives=summary.total_archives,
            first_archived=summary.first_archived,
            last_archived=summary.last_archived,
        )


class SnapshotPageResponse(CamelModel):
    path: str
    display_path: str
    url: str
    size: int
    modified: str

    @classmethod
    def from_page(cls, page: SnapshotPage) -> SnapshotPageResponse:
        return cls(
            path=page.path,
            display_path=page.display_path,
            url=page.display_path,
            size=page.size,
            modified=page.modified,
        )


class PageLinkResponse(CamelModel):
    href: str
    text: str


class PageContentResponse(CamelModel):
    path: str
    title: str
    content: str
    links: list[PageLinkResponse]
    size: int

    @classmethod
    def from_content(cls, page: PageContent) -> PageContentResponse:
        return cls(
            path=page.path,
            title=page.title,
            content=page.content,
            links=[PageLinkResponse(href=link.href, text=link.text) for link in page.links],
            size=page.size,
        )


def _progress(view: JobView) -> ProgressResponse:
    return ProgressResponse(
        pages_processed=view.progress.pages_processed,
        assets_downloaded=view.progress.assets_downloaded,
        current_page_url=view.progress.current_page_url,
    )
