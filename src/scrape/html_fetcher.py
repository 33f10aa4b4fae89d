"""HTTP page fetcher: downloads a URL and normalizes its markup."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

import httpx
from bs4 import ParserRejectedMarkup

from src.batch import BatchOutcome, gather_settled, gather_strict
from src.errors import FetchError, ParseError

from .models import ScrapedPage
from .normalize import normalize_html

logger = logging.getLogger(__name__)

# Content types the normalizer can make sense of.
_MARKUP_TYPES = ("text/html", "application/xhtml+xml", "application/xml", "text/xml", "text/plain")


class PageFetcher(Protocol):
    """Protocol for page fetchers."""

    async def scrape(self, url: str) -> ScrapedPage: ...

    async def scrape_many(self, urls: Sequence[str]) -> list[ScrapedPage]: ...

    async def scrape_many_settled(
        self, urls: Sequence[str]
    ) -> list[BatchOutcome[ScrapedPage]]: ...


def create_http_client(user_agent: str, timeout: float) -> httpx.AsyncClient:
    """Build the connection pool shared by every fetch."""
    return httpx.AsyncClient(
        follow_redirects=True,
        headers={"User-Agent": user_agent},
        timeout=timeout,
    )


def _is_markup(content_type: str) -> bool:
    if not content_type:
        return True
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type in _MARKUP_TYPES


class HtmlPageFetcher:
    """Fetches pages over a shared ``httpx.AsyncClient`` and parses them with BeautifulSoup."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def scrape(self, url: str) -> ScrapedPage:
        """Fetch *url* and return its normalized page.

        Redirects are followed; the returned page carries the URL that was
        actually scraped.
        """
        logger.debug("fetching page", extra={"url": url})
        try:
            resp = await self._client.get(url)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise FetchError(
                f"GET {url} returned HTTP {status}", url=url, status_code=status
            ) from exc
        except httpx.TimeoutException as exc:
            raise FetchError(f"Timed out fetching {url}", url=url) from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise FetchError(f"Failed to fetch {url}: {exc}", url=url) from exc

        final_url = str(resp.url)
        content_type = resp.headers.get("content-type", "")
        if not _is_markup(content_type):
            raise ParseError(
                f"Unsupported content type {content_type!r} at {final_url}", url=url
            )

        try:
            page = normalize_html(resp.text, final_url)
        except ParserRejectedMarkup as exc:
            raise ParseError(f"Could not parse markup from {final_url}: {exc}", url=url) from exc

        logger.debug(
            "page scraped",
            extra={
                "url": url,
                "final_url": final_url,
                "status_code": resp.status_code,
                "content_length": len(page.content),
                "images": len(page.images),
                "metadata_keys": len(page.metadata),
            },
        )
        return page

    async def scrape_many(self, urls: Sequence[str]) -> list[ScrapedPage]:
        """Scrape all *urls* concurrently; any single failure fails the whole call."""
        logger.debug("scraping urls", extra={"url_count": len(urls)})
        return await gather_strict(urls, self.scrape)

    async def scrape_many_settled(
        self, urls: Sequence[str]
    ) -> list[BatchOutcome[ScrapedPage]]:
        """Scrape all *urls* concurrently and report each page or error."""
        logger.debug("scraping urls (settled)", extra={"url_count": len(urls)})
        return await gather_settled(urls, self.scrape)
