"""Completion providers."""

from .provider import (
    CompletionProvider,
    OpenAIProvider,
    ProviderConfig,
    build_provider,
    decode_structured,
    strip_code_fences,
)

__all__ = [
    "CompletionProvider",
    "OpenAIProvider",
    "ProviderConfig",
    "build_provider",
    "decode_structured",
    "strip_code_fences",
]
