"""Job registry for asynchronous archive runs.

Callers submit a seed URL and get a job id back immediately; the crawl runs as
an asyncio task and callers poll its status. Finished jobs move from the
active set to the history set and are never mutated again.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Callable
from pathlib import Path

from sitesnap.core.config import Settings
from sitesnap.core.errors import JobNotFoundError, ValidationError
from sitesnap.core.url_validation import validate_seed_url
from sitesnap.services.crawler import SiteArchiver
from sitesnap.services.metadata import MetadataRecorder
from sitesnap.services.models import (
    Job,
    JobResult,
    JobStatus,
    JobView,
    MetadataEntry,
    generate_job_id,
    isoformat_utc,
    make_snapshot_id,
    utc_now,
)

logger = logging.getLogger(__name__)

Scheduler = Callable[[Job], None]


class JobRegistry:
    """Track archive jobs and schedule their crawls.

    The registry performs no network or filesystem I/O itself; it hands each
    job to the scheduler, which by default runs ``self.run(job)`` as a task on
    the current event loop. Its mappings are guarded by a lock so status reads
    from other threads are safe.

    Args:
        settings: Service settings (data root, default page budget)
        archiver: Crawl engine; built from settings when omitted
        recorder: Host metadata log; built from settings when omitted
        scheduler: Callable receiving each new job; injectable so tests can
            exercise submission without an event loop

    Example:
        >>> registry = JobRegistry(Settings())
        >>> job_id = registry.submit("https://example.com", max_pages=5)
        >>> registry.get_status(job_id).status
        <JobStatus.PENDING: 'pending'>
    """

    def __init__(
        self,
        settings: Settings,
        archiver: SiteArchiver | None = None,
        recorder: MetadataRecorder | None = None,
        scheduler: Scheduler | None = None,
    ) -> None:
        self._settings = settings
        self._archiver = archiver or SiteArchiver(settings)
        self._recorder = recorder or MetadataRecorder(settings.data_dir)
        self._scheduler = scheduler or self._schedule_task
        self._active: dict[str, Job] = {}
        self._history: dict[str, Job] = {}
        self._tasks: dict[str, asyncio.Task[None]] = {}
        self._lock = threading.Lock()

    @property
    def recorder(self) -> MetadataRecorder:
        return self._recorder

    def snapshot_dir(self, hostname: str, snapshot_id: str) -> Path:
        return self._settings.data_dir / hostname / snapshot_id

    def submit(self, target_url: str, max_pages: int | None = None) -> str:
        """Validate a request, register a pending job and schedule its crawl.

        Args:
            target_url: Seed URL; must have an http(s) scheme and a host
            max_pages: Page budget; settings.default_max_pages when omitted

        Returns:
            The new job id

        Raises:
            ValidationError: If the URL or budget is invalid. No job is
                created in that case.
        """
        hostname = validate_seed_url(target_url)
        if max_pages is None:
            max_pages = self._settings.default_max_pages
        elif isinstance(max_pages, bool) or not isinstance(max_pages, int) or max_pages <= 0:
            raise ValidationError(f"maxPages must be a positive integer, got {max_pages!r}")

        job = Job(
            id=generate_job_id(),
            target_url=target_url.strip(),
            hostname=hostname,
            max_pages=max_pages,
        )
        with self._lock:
            self._active[job.id] = job

        try:
            self._scheduler(job)
        except Exception:
            with self._lock:
                self._active.pop(job.id, None)
            raise

        logger.info("Submitted job %s for %s (max %d pages)", job.id, job.target_url, max_pages)
        return job.id

    def get_status(self, job_id: str) -> JobView:
        """Return a snapshot of a job, active or finished.

        Raises:
            JobNotFoundError: If the id is unknown
        """
        with self._lock:
            job = self._active.get(job_id) or self._history.get(job_id)
            if job is None:
                raise JobNotFoundError(job_id)
            return job.view()

    def list_active(self) -> list[JobView]:
        with self._lock:
            return [job.view() for job in self._active.values()]

    def list_history(self) -> list[JobView]:
        with self._lock:
            return [job.view() for job in self._history.values()]

    async def wait(self, job_id: str) -> JobView:
        """Wait for a scheduled job to finish and return its final view."""
        task = self._tasks.get(job_id)
        if task is not None:
            await asyncio.shield(task)
        return self.get_status(job_id)

    async def run(self, job: Job) -> None:
        """Run one job to a terminal state.

        Marks the job running, crawls into a new snapshot, records the
        snapshot in the host log and marks the job completed. Any exception
        marks it failed with the exception message instead; either way the
        job ends in the history set.
        """
        snapshot_id = make_snapshot_id()
        job.started_at = isoformat_utc(utc_now())
        job.transition(JobStatus.RUNNING)
        logger.info("Job %s started: %s -> %s/%s", job.id, job.target_url, job.hostname, snapshot_id)

        try:
            summary = await self._archiver.archive(
                job, self.snapshot_dir(job.hostname, snapshot_id)
            )
            completed_at = isoformat_utc(utc_now())
            await self._recorder.record(
                job.hostname,
                MetadataEntry(
                    snapshot_id=snapshot_id,
                    source_url=job.target_url,
                    asset_count=summary.asset_count,
                    page_count=summary.page_count,
                    created_at=completed_at,
                ),
            )
        except asyncio.CancelledError:
            self._fail(job, "Job cancelled")
            raise
        except Exception as exc:
            logger.exception("Archive job %s failed", job.id)
            self._fail(job, str(exc) or type(exc).__name__)
        else:
            job.result = JobResult(
                hostname=job.hostname,
                snapshot_id=snapshot_id,
                asset_count=summary.asset_count,
                page_count=summary.page_count,
            )
            job.completed_at = completed_at
            job.transition(JobStatus.COMPLETED)
            logger.info(
                "Job %s completed: %d pages, %d assets",
                job.id,
                summary.page_count,
                summary.asset_count,
            )
        finally:
            self._finalize(job)

    def _fail(self, job: Job, error: str) -> None:
        job.error = error
        job.completed_at = isoformat_utc(utc_now())
        job.transition(JobStatus.FAILED)

    def _finalize(self, job: Job) -> None:
        with self._lock:
            self._active.pop(job.id, None)
            self._history[job.id] = job

    def _schedule_task(self, job: Job) -> None:
        loop = asyncio.get_running_loop()
        task = loop.create_task(self.run(job), name=f"archive-{job.id}")
        self._tasks[job.id] = task
        task.add_done_callback(lambda _task, job_id=job.id: self._tasks.pop(job_id, None))
