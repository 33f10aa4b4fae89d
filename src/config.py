"""Pydantic Settings — loads configuration from environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "extra": "ignore"}

    # Empty disables X-API-Key auth.
    api_key: str = ""

    llm_provider: str = "openai"
    openai_api_key: str = ""
    llm_base_url: str = ""
    llm_model: str = "gpt-4o-mini"
    llm_temperature: float = 0.7
    llm_max_tokens: int = 1000
    llm_timeout_seconds: float = 60.0

    request_timeout_seconds: float = 120.0
    user_agent: str = "company-profiler/0.1.0"

    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
