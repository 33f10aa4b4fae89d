"""Failure taxonomy for the extraction pipeline."""

from __future__ import annotations

from typing import ClassVar


class ExtractionError(Exception):
    """Base class for every failure the pipeline reports to its callers."""

    kind: ClassVar[str] = "extraction_error"

    def __init__(self, message: str, *, url: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.url = url

    def to_dict(self) -> dict[str, str]:
        return {"kind": self.kind, "message": self.message}


class FetchError(ExtractionError):
    """Network, timeout or HTTP-status failure while retrieving a page."""

    kind = "fetch_error"

    def __init__(
        self, message: str, *, url: str | None = None, status_code: int | None = None
    ) -> None:
        super().__init__(message, url=url)
        self.status_code = status_code


class ParseError(ExtractionError):
    """Retrieved content cannot be parsed as markup."""

    kind = "parse_error"


class ProviderError(ExtractionError):
    """Transport, auth or quota failure calling the completion provider."""

    kind = "provider_error"


class DecodeError(ExtractionError):
    """Completion text is not JSON or does not match the expected shape."""

    kind = "decode_error"


class ValidationError(ExtractionError):
    """Malformed request at the HTTP boundary."""

    kind = "validation_error"
