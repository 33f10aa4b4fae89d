"""Company profile records produced by the extraction pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from src.scrape.models import ScrapedPage


class CompanyProfile(BaseModel):
    """Company facts as decoded from a model reply.

    Keys are camelCase on the wire. Anything the reply leaves out stays absent.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    company_name: str | None = None
    description: str | None = None
    services: list[str] = Field(default_factory=list)
    key_messages: list[str] = Field(default_factory=list)
    industry: str | None = None
    founded_year: int | None = None

    @field_validator("services", "key_messages", mode="before")
    @classmethod
    def _null_list_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("founded_year", mode="before")
    @classmethod
    def _unreadable_year_is_absent(cls, value: Any) -> Any:
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        if isinstance(value, float):
            return int(value) if value.is_integer() else None
        if isinstance(value, str):
            stripped = value.strip()
            return int(stripped) if stripped.isdigit() else None
        return None


@dataclass(frozen=True)
class ExtractionResult:
    """A decoded profile paired with the page it was read from."""

    profile: CompanyProfile
    page: ScrapedPage
