"""FastAPI app entrypoint."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.api.handlers import install_error_handlers
from src.api.routes import router
from src.config import get_settings
from src.extraction.service import CompanyExtractor
from src.llm.provider import build_provider
from src.logging_config import setup_logging
from src.scrape.html_fetcher import HtmlPageFetcher, create_http_client

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()

    # Initialize logging FIRST so all subsequent operations produce JSON logs
    setup_logging(settings.log_level)
    logger.info("starting company profiler")

    # One connection pool shared by every page fetch
    http_client = create_http_client(settings.user_agent, settings.request_timeout_seconds)
    fetcher = HtmlPageFetcher(http_client)
    provider = build_provider(settings)

    # Attach to app state for dependency injection
    app.state.settings = settings
    app.state.provider = provider
    app.state.extractor = CompanyExtractor(fetcher, provider)

    logger.info(
        "company profiler ready",
        extra={
            "llm_provider": settings.llm_provider,
            "llm_model": settings.llm_model,
            "auth_enabled": bool(settings.api_key),
        },
    )

    yield

    # Cleanup
    logger.info("shutting down company profiler")
    await http_client.aclose()
    await provider.aclose()


app = FastAPI(title="Company Profiler", lifespan=lifespan)
install_error_handlers(app)
app.include_router(router)


@app.get("/health")
async def health():
    return {"status": "ok"}
