"""Prompt template for company-profile extraction."""

# Output keys the model must produce, in the order they are listed to it.
PROFILE_KEYS = (
    "companyName",
    "description",
    "services",
    "keyMessages",
    "industry",
    "foundedYear",
)

EXTRACTION_PROMPT = """\
Extract company information from this content and return ONLY valid JSON with no other text:

Content: {content}

Return JSON with keys: {keys}
Do not include markdown formatting or explanatory text.
"""


def format_extraction_prompt(content: str) -> str:
    """Embed the scraped *content* verbatim into the extraction prompt."""
    return EXTRACTION_PROMPT.format(content=content, keys=", ".join(PROFILE_KEYS))
