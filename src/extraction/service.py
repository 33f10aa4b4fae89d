"""Extraction orchestrator: scrape -> prompt -> structured completion."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from src.batch import BatchOutcome, gather_settled, gather_strict
from src.llm.provider import CompletionProvider
from src.scrape.html_fetcher import PageFetcher

from .models import CompanyProfile, ExtractionResult
from .prompts import format_extraction_prompt

logger = logging.getLogger(__name__)


class CompanyExtractor:
    """Turns company web pages into structured profiles.

    A single pass per URL: no retries, no caching, no rate limiting. Every
    failure from the fetcher or the provider reaches the caller unchanged.
    """

    def __init__(self, fetcher: PageFetcher, provider: CompletionProvider) -> None:
        self._fetcher = fetcher
        self._provider = provider

    async def extract(self, url: str) -> ExtractionResult:
        """Scrape *url* and decode a CompanyProfile from its content."""
        logger.info("extracting company data", extra={"url": url, "provider": self._provider.name})

        page = await self._fetcher.scrape(url)
        prompt = format_extraction_prompt(page.content)
        profile = await self._provider.generate_structured(prompt, CompanyProfile)

        logger.info(
            "company data extracted",
            extra={
                "url": url,
                "final_url": page.url,
                "company_name": profile.company_name,
                "content_length": len(page.content),
            },
        )
        return ExtractionResult(profile=profile, page=page)

    async def extract_many(self, urls: Sequence[str]) -> list[ExtractionResult]:
        """Extract every URL concurrently, in input order; one failure fails all."""
        logger.info("batch extraction started", extra={"url_count": len(urls)})
        results = await gather_strict(urls, self.extract)
        logger.info("batch extraction completed", extra={"url_count": len(results)})
        return results

    async def extract_many_settled(
        self, urls: Sequence[str]
    ) -> list[BatchOutcome[ExtractionResult]]:
        """Extract every URL concurrently and report each result or error."""
        logger.info("settled batch extraction started", extra={"url_count": len(urls)})
        outcomes = await gather_settled(urls, self.extract)
        logger.info(
            "settled batch extraction completed",
            extra={
                "url_count": len(outcomes),
                "failed": sum(1 for o in outcomes if not o.ok),
            },
        )
        return outcomes
