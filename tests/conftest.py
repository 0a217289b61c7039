"""Shared pytest fixtures for unit tests."""

from pathlib import Path

import pytest

from sitesnap.core.config import Settings
from sitesnap.services.models import Job

SITE = "https://example.com"


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    return tmp_path / "data"


@pytest.fixture
def settings(data_dir: Path) -> Settings:
    """Settings with an isolated data root and no throttling waits."""
    return Settings(
        data_dir=data_dir,
        asset_interval=0,
        page_interval=0,
        _env_file=None,
    )


@pytest.fixture
def make_job():
    def _make(url: str = f"{SITE}/", max_pages: int = 10) -> Job:
        return Job(id="job_test", target_url=url, hostname="example.com", max_pages=max_pages)

    return _make
