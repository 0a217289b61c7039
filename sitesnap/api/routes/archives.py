"""Snapshot browsing endpoints.

Example:
    GET /api/archives/example.com
    GET /api/sitemap/example.com/2024-05-01T12-00-00-000Z
    GET /api/sitemap/example.com/2024-05-01T12-00-00-000Z/docs/intro
"""

from fastapi import APIRouter, Depends

from sitesnap.api.dependencies import get_browser, get_recorder
from sitesnap.api.models.responses import (
    HostSummaryResponse,
    MetadataEntryResponse,
    PageContentResponse,
    SnapshotPageResponse,
)
from sitesnap.services.metadata import MetadataRecorder
from sitesnap.services.snapshots import SnapshotBrowser

router = APIRouter(prefix="/api", tags=["archives"])


@router.get("/archives", response_model=list[HostSummaryResponse])
async def list_archives(
    recorder: MetadataRecorder = Depends(get_recorder),
) -> list[HostSummaryResponse]:
    """List archived hosts, most recently archived first."""
    return [HostSummaryResponse.from_summary(s) for s in recorder.list_hosts()]


@router.get("/archives/{host}", response_model=list[MetadataEntryResponse])
async def host_archives(
    host: str, recorder: MetadataRecorder = Depends(get_recorder)
) -> list[MetadataEntryResponse]:
    """Return a host's snapshot log; empty when the host was never archived."""
    return [MetadataEntryResponse.from_entry(e) for e in recorder.read(host)]


@router.get("/sitemap/{host}/{snapshot_id}", response_model=list[SnapshotPageResponse])
async def snapshot_pages(
    host: str, snapshot_id: str, browser: SnapshotBrowser = Depends(get_browser)
) -> list[SnapshotPageResponse]:
    return [SnapshotPageResponse.from_page(p) for p in browser.list_pages(host, snapshot_id)]


@router.get("/sitemap/{host}/{snapshot_id}/{page:path}", response_model=PageContentResponse)
async def page_content(
    host: str,
    snapshot_id: str,
    page: str,
    browser: SnapshotBrowser = Depends(get_browser),
) -> PageContentResponse:
    return PageContentResponse.from_content(browser.read_page(host, snapshot_id, page))
