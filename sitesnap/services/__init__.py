"""Service layer for site archiving: crawl engine, jobs and snapshot history."""

from sitesnap.services.assets import AssetDownloader, resolve_reference
from sitesnap.services.classifier import ResourceClassifier, SkipRule
from sitesnap.services.crawler import SiteArchiver
from sitesnap.services.jobs import JobRegistry
from sitesnap.services.metadata import MetadataRecorder
from sitesnap.services.models import (
    CrawlSummary,
    HostSummary,
    Job,
    JobProgress,
    JobResult,
    JobStatus,
    JobView,
    MetadataEntry,
    PageContent,
    SnapshotPage,
)
from sitesnap.services.snapshots import SnapshotBrowser
from sitesnap.services.throttle import Throttle

__all__ = [
    "AssetDownloader",
    "CrawlSummary",
    "HostSummary",
    "Job",
    "JobProgress",
    "JobRegistry",
    "JobResult",
    "JobStatus",
    "JobView",
    "MetadataEntry",
    "MetadataRecorder",
    "PageContent",
    "ResourceClassifier",
    "SiteArchiver",
    "SkipRule",
    "SnapshotBrowser",
    "SnapshotPage",
    "Throttle",
    "resolve_reference",
]
