"""Chat-completion provider with JSON-decoding support."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Protocol, TypeVar

import openai
from openai import AsyncOpenAI
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from src.errors import DecodeError, ProviderError

if TYPE_CHECKING:
    from src.config import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

JSON_ONLY_INSTRUCTION = "Respond with valid JSON only."

_PROBE_PROMPT = "Test"

# Fence tokens removed from replies before decoding, longest first.
_FENCE_TOKENS = ("```json", "```")


@dataclass(frozen=True)
class ProviderConfig:
    """Resolved settings for one completion provider instance."""

    api_key: str
    model: str
    temperature: float = 0.7
    max_tokens: int = 1000
    base_url: str = ""
    timeout: float = 60.0

    @classmethod
    def from_settings(cls, settings: Settings, base_url: str = "") -> ProviderConfig:
        return cls(
            api_key=settings.openai_api_key,
            model=settings.llm_model,
            temperature=settings.llm_temperature,
            max_tokens=settings.llm_max_tokens,
            base_url=settings.llm_base_url or base_url,
            timeout=settings.llm_timeout_seconds,
        )


class CompletionProvider(Protocol):
    """Protocol for completion providers."""

    @property
    def name(self) -> str: ...

    async def generate_text(self, prompt: str) -> str: ...

    async def generate_structured(self, prompt: str, output_type: type[T]) -> T: ...

    async def is_available(self) -> bool: ...


def strip_code_fences(text: str) -> str:
    """Remove markdown fence tokens wherever they occur and trim.

    Purely textual: prose around a fenced block is left in place and will
    make the subsequent JSON parse fail.
    """
    for token in _FENCE_TOKENS:
        text = text.replace(token, "")
    return text.strip()


def decode_structured(raw: str, output_type: type[T]) -> T:
    """Decode a completion reply into *output_type* or raise ``DecodeError``."""
    cleaned = strip_code_fences(raw)
    type_name = getattr(output_type, "__name__", repr(output_type))
    try:
        return TypeAdapter(output_type).validate_json(cleaned)
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        raise DecodeError(
            f"Could not decode {type_name} from completion: {first['msg']}"
        ) from exc


class OpenAIProvider:
    """Completion provider for OpenAI and OpenAI-compatible chat endpoints."""

    def __init__(
        self,
        config: ProviderConfig,
        *,
        name: str = "OpenAI",
        client: AsyncOpenAI | None = None,
    ) -> None:
        self._config = config
        self._name = name
        if client is None:
            client = AsyncOpenAI(
                api_key=config.api_key,
                base_url=config.base_url or None,
                timeout=config.timeout,
            )
        self._client = client

    @property
    def name(self) -> str:
        return self._name

    async def generate_text(self, prompt: str) -> str:
        """Send *prompt* as a single user message and return the reply text."""
        logger.debug(
            "completion requested",
            extra={"provider": self._name, "model": self._config.model, "prompt_chars": len(prompt)},
        )
        try:
            completion = await self._client.chat.completions.create(
                model=self._config.model,
                temperature=self._config.temperature,
                max_tokens=self._config.max_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
        except openai.OpenAIError as exc:
            raise ProviderError(f"{self._name} completion failed: {exc}") from exc

        text = completion.choices[0].message.content if completion.choices else None
        if not text:
            raise ProviderError(f"{self._name} returned an empty completion")

        usage = completion.usage
        logger.debug(
            "completion received",
            extra={
                "provider": self._name,
                "model": self._config.model,
                "reply_chars": len(text),
                "prompt_tokens": usage.prompt_tokens if usage else 0,
                "completion_tokens": usage.completion_tokens if usage else 0,
            },
        )
        return text

    async def generate_structured(self, prompt: str, output_type: type[T]) -> T:
        """Ask for JSON and decode the reply into *output_type*."""
        raw = await self.generate_text(f"{prompt}\n\n{JSON_ONLY_INSTRUCTION}")
        return decode_structured(raw, output_type)

    async def is_available(self) -> bool:
        """Probe the endpoint with a trivial completion. Never raises."""
        try:
            await self.generate_text(_PROBE_PROMPT)
        except Exception:
            logger.warning("provider probe failed", extra={"provider": self._name}, exc_info=True)
            return False
        return True

    async def aclose(self) -> None:
        await self._client.close()


# Default endpoints for OpenAI-compatible backends; empty means the SDK default.
_PROVIDER_BASE_URLS = {
    "openai": "",
    "ollama": "http://localhost:11434/v1",
}

_PROVIDER_NAMES = {
    "openai": "OpenAI",
    "ollama": "Ollama",
}


def build_provider(settings: Settings) -> OpenAIProvider:
    """Create the completion provider selected by ``settings.llm_provider``."""
    key = settings.llm_provider.lower()
    if key not in _PROVIDER_BASE_URLS:
        raise ValueError(f"Unsupported LLM provider: {settings.llm_provider!r}")

    config = ProviderConfig.from_settings(settings, base_url=_PROVIDER_BASE_URLS[key])
    if key == "ollama" and not config.api_key:
        # Ollama ignores the key but the SDK requires one.
        config = replace(config, api_key="ollama")
    return OpenAIProvider(config, name=_PROVIDER_NAMES[key])
