"""Fixtures — mock HTTP transport fetcher, mock OpenAI client."""

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
import pytest_asyncio

from src.scrape.html_fetcher import HtmlPageFetcher


@pytest_asyncio.fixture
async def make_fetcher():
    """Factory building an HtmlPageFetcher whose requests go to *handler*."""
    clients: list[httpx.AsyncClient] = []

    def factory(handler) -> HtmlPageFetcher:
        client = httpx.AsyncClient(
            transport=httpx.MockTransport(handler),
            follow_redirects=True,
        )
        clients.append(client)
        return HtmlPageFetcher(client)

    yield factory

    for client in clients:
        await client.aclose()


@pytest.fixture
def openai_client() -> MagicMock:
    """AsyncOpenAI stand-in; set ``chat.completions.create`` per test."""
    client = MagicMock()
    client.chat.completions.create = AsyncMock()
    client.close = AsyncMock()
    return client
