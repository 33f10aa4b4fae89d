"""Request/response Pydantic models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from src.batch import BatchOutcome
from src.extraction.models import CompanyProfile, ExtractionResult
from src.scrape.models import ScrapedPage


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ScrapeRequest(BaseModel):
    url: str


class ScrapeMultipleRequest(BaseModel):
    urls: list[str]


class ErrorResponse(BaseModel):
    error: str


class ErrorDetail(BaseModel):
    kind: str
    message: str


class ScrapedPageOut(_CamelModel):
    url: str
    title: str
    content: str
    metadata: dict[str, str]
    images: list[str]
    scraped_at: datetime

    @classmethod
    def from_page(cls, page: ScrapedPage) -> ScrapedPageOut:
        return cls(
            url=page.url,
            title=page.title,
            content=page.content,
            metadata=dict(page.metadata),
            images=list(page.images),
            scraped_at=page.scraped_at,
        )


class ExtractionResultOut(_CamelModel):
    profile: CompanyProfile
    page: ScrapedPageOut

    @classmethod
    def from_result(cls, result: ExtractionResult) -> ExtractionResultOut:
        return cls(profile=result.profile, page=ScrapedPageOut.from_page(result.page))


class BatchItemOut(_CamelModel):
    url: str
    result: ExtractionResultOut | None = None
    error: ErrorDetail | None = None

    @classmethod
    def from_outcome(cls, outcome: BatchOutcome[ExtractionResult]) -> BatchItemOut:
        if outcome.error is not None:
            return cls(url=outcome.url, error=ErrorDetail(**outcome.error.to_dict()))
        return cls(url=outcome.url, result=ExtractionResultOut.from_result(outcome.value))


class ProviderHealth(BaseModel):
    provider: str
    available: bool
