"""Unit tests for service-layer models."""

import re
from datetime import datetime, timezone

import pytest

from sitesnap.core.errors import JobStateError
from sitesnap.services.models import (
    Job,
    JobStatus,
    MetadataEntry,
    generate_job_id,
    isoformat_utc,
    make_snapshot_id,
)

MOMENT = datetime(2024, 1, 15, 10, 30, 5, 123456, tzinfo=timezone.utc)


def test_isoformat_utc_millisecond_precision() -> None:
    assert isoformat_utc(MOMENT) == "2024-01-15T10:30:05.123Z"


def test_snapshot_id_is_filesystem_safe() -> None:
    snapshot_id = make_snapshot_id(MOMENT)
    assert snapshot_id == "2024-01-15T10-30-05-123Z"
    assert ":" not in snapshot_id and "." not in snapshot_id


def test_generate_job_id_format() -> None:
    assert re.fullmatch(r"job_\d+_[0-9a-f]{8}", generate_job_id())


@pytest.mark.parametrize(
    "path",
    [
        [JobStatus.RUNNING, JobStatus.COMPLETED],
        [JobStatus.RUNNING, JobStatus.FAILED],
        [JobStatus.FAILED],
    ],
)
def test_allowed_transitions(path: list[JobStatus]) -> None:
    job = Job(id="j", target_url="https://example.com", hostname="example.com", max_pages=1)
    for status in path:
        job.transition(status)
    assert job.status is path[-1]
    assert job.status.is_terminal


@pytest.mark.parametrize(
    "path",
    [
        [JobStatus.COMPLETED],
        [JobStatus.RUNNING, JobStatus.PENDING],
        [JobStatus.RUNNING, JobStatus.COMPLETED, JobStatus.FAILED],
    ],
)
def test_illegal_transitions(path: list[JobStatus]) -> None:
    job = Job(id="j", target_url="https://example.com", hostname="example.com", max_pages=1)
    with pytest.raises(JobStateError):
        for status in path:
            job.transition(status)


def test_metadata_entry_json_keys() -> None:
    entry = MetadataEntry("s1", "https://example.com/", 4, 2, "2024-01-15T10:30:05.123Z")

    data = entry.to_json()

    assert list(data) == ["snapshotId", "sourceUrl", "assetCount", "pageCount", "createdAt"]
    assert MetadataEntry.from_json(data) == entry
