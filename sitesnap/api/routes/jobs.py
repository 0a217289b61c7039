"""Archive job endpoints: submit, poll and list active jobs."""

from fastapi import APIRouter, Depends, status

from sitesnap.api.dependencies import get_registry
from sitesnap.api.models.requests import ArchiveRequest
from sitesnap.api.models.responses import (
    ActiveJobResponse,
    JobStatusResponse,
    SubmitResponse,
)
from sitesnap.services.jobs import JobRegistry
from sitesnap.services.models import JobStatus

router = APIRouter(prefix="/api", tags=["jobs"])


@router.post(
    "/archive",
    response_model=SubmitResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def submit_archive(
    request: ArchiveRequest, registry: JobRegistry = Depends(get_registry)
) -> SubmitResponse:
    """Start an archive job and return its id without waiting for the crawl.

    Raises:
        ValidationError: Mapped to 400 when the URL or budget is invalid
    """
    job_id = registry.submit(request.url, request.max_pages)
    return SubmitResponse(job_id=job_id, status=JobStatus.PENDING.value)


@router.get("/jobs/{job_id}", response_model=JobStatusResponse, response_model_exclude_none=True)
async def get_job(job_id: str, registry: JobRegistry = Depends(get_registry)) -> JobStatusResponse:
    return JobStatusResponse.from_view(registry.get_status(job_id))


@router.get("/jobs", response_model=list[ActiveJobResponse])
async def list_jobs(registry: JobRegistry = Depends(get_registry)) -> list[ActiveJobResponse]:
    return [ActiveJobResponse.from_view(view) for view in registry.list_active()]
