"""Company-profile extraction pipeline."""

from .models import CompanyProfile, ExtractionResult
from .prompts import format_extraction_prompt
from .service import CompanyExtractor

__all__ = [
    "CompanyExtractor",
    "CompanyProfile",
    "ExtractionResult",
    "format_extraction_prompt",
]
