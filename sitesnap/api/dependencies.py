"""Request-scoped accessors for services stored on ``app.state``."""

from fastapi import Request

from sitesnap.services.jobs import JobRegistry
from sitesnap.services.metadata import MetadataRecorder
from sitesnap.services.snapshots import SnapshotBrowser


def get_registry(request: Request) -> JobRegistry:
    return request.app.state.registry


def get_recorder(request: Request) -> MetadataRecorder:
    return request.app.state.registry.recorder


def get_browser(request: Request) -> SnapshotBrowser:
    return request.app.state.browser
