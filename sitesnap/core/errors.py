"""Exception hierarchy shared by the archiving engine and its surfaces."""


class SitesnapError(Exception):
    """Base class for all sitesnap errors."""


class ValidationError(SitesnapError, ValueError):
    """Raised when an archive request is rejected before a job exists."""

    pass


class JobNotFoundError(SitesnapError, KeyError):
    """Raised when a job id is neither active nor in history."""

    def __init__(self, job_id: str) -> None:
        super().__init__(job_id)
        self.job_id = job_id

    def __str__(self) -> str:
        return f"Job not found: {self.job_id}"


class JobStateError(SitesnapError):
    """Raised on an illegal job status transition."""


class AssetDownloadError(SitesnapError):
    """Raised when an asset cannot be fetched or stored.

    Args:
        url: Absolute URL of the asset
        reason: Human-readable cause
    """

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Failed to download asset {url}: {reason}")
        self.url = url
        self.reason = reason


class SnapshotNotFoundError(SitesnapError):
    """Raised when a host, snapshot or page does not exist under the data root."""
