"""POST /scrape, POST /scrape-multiple, POST /scrape-multiple/settled, GET /health/provider endpoint handlers."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from src.api.schemas import (
    BatchItemOut,
    ErrorResponse,
    ExtractionResultOut,
    ProviderHealth,
    ScrapeMultipleRequest,
    ScrapeRequest,
)
from src.auth.dependencies import require_api_key
from src.errors import ValidationError
from src.extraction.service import CompanyExtractor
from src.llm.provider import CompletionProvider

router = APIRouter(
    dependencies=[Depends(require_api_key)],
    responses={400: {"model": ErrorResponse}},
)


def _get_extractor(request: Request) -> CompanyExtractor:
    return request.app.state.extractor


def _get_provider(request: Request) -> CompletionProvider:
    return request.app.state.provider


def _clean_url(url: str) -> str:
    url = url.strip()
    if not url:
        raise ValidationError("URL is required")
    return url


def _clean_urls(urls: list[str]) -> list[str]:
    return [_clean_url(url) for url in urls]


@router.post("/scrape", response_model=ExtractionResultOut)
async def scrape_website(
    body: ScrapeRequest,
    extractor: CompanyExtractor = Depends(_get_extractor),
):
    result = await extractor.extract(_clean_url(body.url))
    return ExtractionResultOut.from_result(result)


@router.post("/scrape-multiple", response_model=list[ExtractionResultOut])
async def scrape_multiple_websites(
    body: ScrapeMultipleRequest,
    extractor: CompanyExtractor = Depends(_get_extractor),
):
    results = await extractor.extract_many(_clean_urls(body.urls))
    return [ExtractionResultOut.from_result(r) for r in results]


@router.post("/scrape-multiple/settled", response_model=list[BatchItemOut])
async def scrape_multiple_websites_settled(
    body: ScrapeMultipleRequest,
    extractor: CompanyExtractor = Depends(_get_extractor),
):
    outcomes = await extractor.extract_many_settled(_clean_urls(body.urls))
    return [BatchItemOut.from_outcome(o) for o in outcomes]


@router.get("/health/provider", response_model=ProviderHealth)
async def provider_health(provider: CompletionProvider = Depends(_get_provider)):
    return ProviderHealth(provider=provider.name, available=await provider.is_available())
