"""Data models for the scrape submodule."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ScrapedPage:
    """A single scraped web page reduced to text, metadata and images."""

    url: str
    title: str = ""
    content: str = ""
    metadata: dict[str, str] = field(default_factory=dict)
    images: list[str] = field(default_factory=list)
    scraped_at: datetime = field(default_factory=_utcnow)
