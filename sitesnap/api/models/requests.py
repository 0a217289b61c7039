"""Request models for API endpoints."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ArchiveRequest(BaseModel):
    """Body of ``POST /api/archive``.

    Attributes:
        url: Seed URL to archive
        max_pages: Optional page budget (``maxPages`` on the wire)

    Example:
        >>> ArchiveRequest.model_validate({"url": "https://example.com", "maxPages": 5})
        ArchiveRequest(url='https://example.com', max_pages=5)
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    url: str = ""
    max_pages: int | None = Field(default=None)
