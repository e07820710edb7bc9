"""Application settings parsed from environment variables and defaults."""

import json
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CORS_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    app_name: str = "Discovery Chat API"
    environment: str = "development"
    api_prefix: str = "/api"

    tmdb_api_key: Optional[str] = None
    tmdb_api_auth_header: Optional[str] = None
    tmdb_base_url: str = "https://api.themoviedb.org/3"
    openai_api_key: Optional[str] = None
    completion_endpoint: str = "https://api.openai.com/v1/chat/completions"
    intent_model: str = "gpt-4o"
    response_model: str = "gpt-4o-mini"
    intent_assist_enabled: bool = True

    http_timeout_seconds: float = 15.0
    http_retry_attempts: int = 2
    http_retry_max_wait_seconds: float = 4.0

    default_country: str = "US"
    discover_max_pages: int = 5
    discover_result_soft_cap: int = 100
    discover_page_delay_seconds: float = 0.1
    min_result_count: int = 5
    vote_count_floors: list[tuple[float, int]] = Field(
        default_factory=lambda: [(8.0, 20), (7.0, 10), (6.0, 5)]
    )
    vote_count_base: int = 3
    trending_result_cap: int = 50
    related_result_cap: int = 20
    history_turn_limit: int = 6

    upstream_circuit_threshold: int = 3
    upstream_backoff_seconds: float = 15.0
    upstream_max_backoff_seconds: float = 300.0

    log_level: str = "INFO"
    cors_origins: list[str] | str = Field(default_factory=lambda: DEFAULT_CORS_ORIGINS.copy())
    health_allowlist: list[str] | str = Field(default_factory=list)

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _split_cors_origins(cls, value: str | list[str] | None) -> list[str]:
        """Normalize CORS origins from JSON, CSV, or list inputs."""
        if isinstance(value, list):
            cleaned = [origin.strip() for origin in value if isinstance(origin, str) and origin.strip()]
            return cleaned or DEFAULT_CORS_ORIGINS.copy()
        if isinstance(value, str):
            cleaned = _split_list(value)
            if cleaned:
                return cleaned
        return DEFAULT_CORS_ORIGINS.copy()

    @field_validator("health_allowlist", mode="before")
    @classmethod
    def _split_health_allowlist(cls, value: str | list[str] | None) -> list[str]:
        """Normalize health allowlist entries from JSON, CSV, or list inputs."""
        if isinstance(value, list):
            return [item.strip() for item in value if isinstance(item, str) and item.strip()]
        if isinstance(value, str):
            return _split_list(value)
        return []

    @field_validator("vote_count_floors", mode="after")
    @classmethod
    def _order_vote_count_floors(cls, value: list[tuple[float, int]]) -> list[tuple[float, int]]:
        """Keep the strictest rating threshold first so lookups stop at the best match."""
        return sorted(value, key=lambda pair: pair[0], reverse=True)

    def missing_credentials(self) -> list[str]:
        """Return the names of upstream credentials that are not configured."""
        missing: list[str] = []
        if not (self.tmdb_api_auth_header or self.tmdb_api_key):
            missing.append("TMDB_API_AUTH_HEADER or TMDB_API_KEY")
        if not self.openai_api_key:
            missing.append("OPENAI_API_KEY")
        return missing

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


def _split_list(value: str) -> list[str]:
    stripped = value.strip()
    if not stripped:
        return []
    try:
        parsed = json.loads(stripped)
    except json.JSONDecodeError:
        parsed = None
    if isinstance(parsed, list):
        return [str(item).strip() for item in parsed if str(item).strip()]
    return [item.strip() for item in stripped.split(",") if item.strip()]


@lru_cache
def get_settings() -> Settings:
    """Return cached settings to avoid re-parsing environment variables."""
    return Settings()


settings = get_settings()
