"""Completion provider tests — mocked AsyncOpenAI client."""

from unittest.mock import AsyncMock, MagicMock

import httpx
import openai
import pytest

from src.config import Settings
from src.errors import DecodeError, ProviderError
from src.extraction.models import CompanyProfile
from src.llm.provider import (
    JSON_ONLY_INSTRUCTION,
    OpenAIProvider,
    ProviderConfig,
    build_provider,
    decode_structured,
    strip_code_fences,
)

ACME_JSON = (
    '{"companyName":"Acme","description":"...", "services":[], "keyMessages":[], '
    '"industry":"Tech","foundedYear":1999}'
)


def _config(**overrides) -> ProviderConfig:
    defaults = dict(api_key="test-key", model="gpt-4o-mini", temperature=0.2, max_tokens=500)
    defaults.update(overrides)
    return ProviderConfig(**defaults)


def _completion(content: str | None) -> MagicMock:
    completion = MagicMock()
    completion.choices = [MagicMock()]
    completion.choices[0].message.content = content
    completion.usage.prompt_tokens = 10
    completion.usage.completion_tokens = 20
    return completion


def _provider(openai_client, reply: str | None = "ok") -> OpenAIProvider:
    openai_client.chat.completions.create.return_value = _completion(reply)
    return OpenAIProvider(_config(), client=openai_client)


def _connection_error() -> openai.APIConnectionError:
    return openai.APIConnectionError(
        request=httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    )


# --- Fence stripping (sync) ---


def test_strip_json_fence():
    assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'


def test_strip_bare_fence():
    assert strip_code_fences('```\n{"a": 1}\n```') == '{"a": 1}'


def test_strip_leaves_unfenced_text():
    assert strip_code_fences('  {"a": 1}\n') == '{"a": 1}'


def test_strip_keeps_surrounding_prose():
    text = 'Here you go:\n```json\n{"a": 1}\n```\nThanks'
    assert strip_code_fences(text) == 'Here you go:\n\n{"a": 1}\n\nThanks'


# --- Structured decoding (sync) ---


def test_decode_fenced_profile():
    profile = decode_structured(f"```json\n{ACME_JSON}\n```", CompanyProfile)
    assert profile.company_name == "Acme"
    assert profile.industry == "Tech"
    assert profile.services == []
    assert profile.founded_year == 1999


def test_decode_invalid_json_raises():
    with pytest.raises(DecodeError):
        decode_structured("```json\n{not json\n```", CompanyProfile)


def test_decode_null_raises():
    with pytest.raises(DecodeError):
        decode_structured("null", CompanyProfile)


def test_decode_prose_around_fence_raises():
    with pytest.raises(DecodeError):
        decode_structured(f"Sure! Here it is:\n```json\n{ACME_JSON}\n```", CompanyProfile)


def test_decode_wrong_shape_raises():
    with pytest.raises(DecodeError):
        decode_structured('{"companyName": "Acme", "services": "widgets"}', CompanyProfile)


def test_decode_chains_pydantic_error():
    with pytest.raises(DecodeError) as exc_info:
        decode_structured("[]", CompanyProfile)
    assert exc_info.value.__cause__ is not None
    assert "CompanyProfile" in exc_info.value.message


def test_decode_missing_fields_are_absent():
    profile = decode_structured('{"companyName": "Acme"}', CompanyProfile)
    assert profile.company_name == "Acme"
    assert profile.description is None
    assert profile.key_messages == []
    assert profile.founded_year is None


def test_decode_null_lists_are_empty():
    profile = decode_structured(
        '{"companyName": "Acme", "services": null, "keyMessages": null}', CompanyProfile
    )
    assert profile.company_name == "Acme"
    assert profile.services == []
    assert profile.key_messages == []


def test_decode_accepts_snake_case_keys():
    profile = decode_structured('{"company_name": "Acme", "key_messages": ["fast"]}', CompanyProfile)
    assert profile.company_name == "Acme"
    assert profile.key_messages == ["fast"]


@pytest.mark.parametrize(
    "raw, expected",
    [("1999", 1999), (" 2004 ", 2004), ("unknown", None), ("circa 1990", None), (None, None), (1987.0, 1987)],
)
def test_decode_founded_year_variants(raw, expected):
    profile = CompanyProfile.model_validate({"foundedYear": raw})
    assert profile.founded_year == expected


def test_decode_into_list_type():
    assert decode_structured('```\n["a", "b"]\n```', list[str]) == ["a", "b"]


# --- generate_text ---


@pytest.mark.asyncio
async def test_generate_text_sends_single_user_message(openai_client):
    provider = _provider(openai_client, reply="hello")

    assert await provider.generate_text("Say hello") == "hello"

    openai_client.chat.completions.create.assert_awaited_once_with(
        model="gpt-4o-mini",
        temperature=0.2,
        max_tokens=500,
        messages=[{"role": "user", "content": "Say hello"}],
    )


@pytest.mark.asyncio
async def test_generate_text_wraps_sdk_errors(openai_client):
    openai_client.chat.completions.create.side_effect = _connection_error()
    provider = OpenAIProvider(_config(), client=openai_client)

    with pytest.raises(ProviderError) as exc_info:
        await provider.generate_text("hi")

    assert isinstance(exc_info.value.__cause__, openai.APIConnectionError)


@pytest.mark.asyncio
async def test_generate_text_empty_reply_raises(openai_client):
    provider = _provider(openai_client, reply=None)
    with pytest.raises(ProviderError, match="empty"):
        await provider.generate_text("hi")


@pytest.mark.asyncio
async def test_generate_text_no_choices_raises(openai_client):
    completion = _completion("unused")
    completion.choices = []
    openai_client.chat.completions.create.return_value = completion
    provider = OpenAIProvider(_config(), client=openai_client)

    with pytest.raises(ProviderError):
        await provider.generate_text("hi")


# --- generate_structured ---


@pytest.mark.asyncio
async def test_generate_structured_decodes_fenced_reply(openai_client):
    provider = _provider(openai_client, reply=f"```json\n{ACME_JSON}\n```")

    profile = await provider.generate_structured("Extract it", CompanyProfile)

    assert profile.company_name == "Acme"
    assert profile.founded_year == 1999
    sent = openai_client.chat.completions.create.call_args.kwargs["messages"][0]["content"]
    assert sent.startswith("Extract it")
    assert sent.endswith(JSON_ONLY_INSTRUCTION)


@pytest.mark.asyncio
async def test_generate_structured_invalid_reply_raises(openai_client):
    provider = _provider(openai_client, reply="I could not find any company information.")
    with pytest.raises(DecodeError):
        await provider.generate_structured("Extract it", CompanyProfile)


@pytest.mark.asyncio
async def test_generate_structured_propagates_provider_error(openai_client):
    openai_client.chat.completions.create.side_effect = _connection_error()
    provider = OpenAIProvider(_config(), client=openai_client)
    with pytest.raises(ProviderError):
        await provider.generate_structured("Extract it", CompanyProfile)


# --- is_available ---


@pytest.mark.asyncio
async def test_is_available_true(openai_client):
    provider = _provider(openai_client, reply="pong")
    assert await provider.is_available() is True


@pytest.mark.asyncio
async def test_is_available_false_on_provider_error(openai_client):
    openai_client.chat.completions.create.side_effect = _connection_error()
    provider = OpenAIProvider(_config(), client=openai_client)
    assert await provider.is_available() is False


@pytest.mark.asyncio
async def test_is_available_never_raises(openai_client):
    openai_client.chat.completions.create.side_effect = RuntimeError("boom")
    provider = OpenAIProvider(_config(), client=openai_client)
    assert await provider.is_available() is False


@pytest.mark.asyncio
async def test_aclose_closes_client(openai_client):
    provider = OpenAIProvider(_config(), client=openai_client)
    await provider.aclose()
    openai_client.close.assert_awaited_once()


# --- Factory (sync) ---


def test_provider_config_from_settings():
    settings = Settings(
        openai_api_key="sk-test",
        llm_model="gpt-4o",
        llm_temperature=0.1,
        llm_max_tokens=256,
        llm_base_url="",
        llm_timeout_seconds=5,
    )
    config = ProviderConfig.from_settings(settings, base_url="http://fallback/v1")
    assert config == ProviderConfig(
        api_key="sk-test",
        model="gpt-4o",
        temperature=0.1,
        max_tokens=256,
        base_url="http://fallback/v1",
        timeout=5,
    )


def test_build_openai_provider():
    provider = build_provider(Settings(llm_provider="openai", openai_api_key="sk-test"))
    assert isinstance(provider, OpenAIProvider)
    assert provider.name == "OpenAI"


def test_build_ollama_provider_uses_local_endpoint():
    provider = build_provider(
        Settings(llm_provider="Ollama", openai_api_key="", llm_base_url="")
    )
    assert provider.name == "Ollama"
    assert provider._config.api_key == "ollama"
    assert str(provider._client.base_url).startswith("http://localhost:11434/v1")


def test_build_unknown_provider_raises():
    with pytest.raises(ValueError, match="Unsupported LLM provider"):
        build_provider(Settings(llm_provider="carrier-pigeon"))


def test_explicit_config_keeps_providers_independent():
    first = OpenAIProvider(_config(model="model-a"), client=MagicMock())
    second = OpenAIProvider(_config(model="model-b"), client=MagicMock())
    assert first._config.model == "model-a"
    assert second._config.model == "model-b"
