"""Web page fetching and normalization."""

from .html_fetcher import HtmlPageFetcher, PageFetcher, create_http_client
from .models import ScrapedPage
from .normalize import normalize_html

__all__ = [
    "HtmlPageFetcher",
    "PageFetcher",
    "ScrapedPage",
    "create_http_client",
    "normalize_html",
]
