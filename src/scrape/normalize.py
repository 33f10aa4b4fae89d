"""HTML normalization: markup in, ScrapedPage out."""

from __future__ import annotations

from urllib.parse import urljoin

from bs4 import BeautifulSoup

from .models import ScrapedPage

# Elements treated as page chrome rather than content.
NOISE_TAGS = ["script", "style", "nav", "header", "footer"]


def _strip_noise(soup: BeautifulSoup) -> None:
    for tag in soup.find_all(NOISE_TAGS):
        # Nested noise goes away with its ancestor.
        if tag.decomposed:
            continue
        tag.decompose()


def _extract_title(soup: BeautifulSoup) -> str:
    title = soup.find("title")
    if title is None:
        return ""
    return title.get_text().strip()


def _extract_content(soup: BeautifulSoup) -> str:
    root = soup.find("main") or soup.find("body")
    if root is None:
        return ""
    return root.get_text().strip()


def _extract_images(soup: BeautifulSoup, base_url: str) -> list[str]:
    """Resolve every ``img[src]`` against *base_url*, keeping document order."""
    images: list[str] = []
    for img in soup.find_all("img"):
        src = img.get("src")
        if not isinstance(src, str) or not src.strip():
            continue
        images.append(urljoin(base_url, src.strip()))
    return images


def _extract_metadata(soup: BeautifulSoup) -> dict[str, str]:
    """Collect ``meta`` name/property -> content pairs; later tags overwrite earlier ones."""
    metadata: dict[str, str] = {}
    for meta in soup.find_all("meta"):
        key = meta.get("name") or meta.get("property")
        content = meta.get("content")
        if key and content:
            metadata[str(key)] = str(content)
    return metadata


def normalize_html(html: str, url: str) -> ScrapedPage:
    """Parse *html* fetched from *url* and reduce it to a ScrapedPage.

    Noise elements are removed before anything else is read, so images and
    meta tags inside them are dropped too. Content comes from ``main`` when
    present, otherwise ``body``; a document with neither has empty content.
    """
    soup = BeautifulSoup(html, "html.parser")
    _strip_noise(soup)

    return ScrapedPage(
        url=url,
        title=_extract_title(soup),
        content=_extract_content(soup),
        metadata=_extract_metadata(soup),
        images=_extract_images(soup, url),
    )
