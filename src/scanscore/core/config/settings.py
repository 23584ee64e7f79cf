"""Application configuration using Pydantic Settings with YAML support.

Configuration is organized in nested sections mirroring the YAML files under
``config/base/``, with environment-specific overrides under
``config/environments/{APP_ENV}/``. Secrets are read from the environment or
a ``.env`` file only.
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict

from .yaml_source import MultiYamlConfigSettingsSource


if TYPE_CHECKING:
    from pydantic_settings import PydanticBaseSettingsSource


# =============================================================================
# Nested Configuration Models (from YAML)
# =============================================================================


class AppSettings(BaseModel):
    """Application identity settings."""

    name: str = "ScanScore Service"
    version: str = "0.1.0"
    debug: bool = False


class ServerSettings(BaseModel):
    """Server configuration settings."""

    host: str = "127.0.0.1"
    port: int = 8000


class ApiSettings(BaseModel):
    """API configuration settings."""

    v1_prefix: str = "/api/v1/scanscore"
    cors_origins: list[str] = []


class RedisSettings(BaseModel):
    """Redis configuration settings."""

    enabled: bool = True
    host: str = "localhost"
    port: int = 6379
    user: str | None = None
    cache_db: int = 0
    rate_limit_db: int = 2
    max_connections: int = 20


class RateLimitingSettings(BaseModel):
    """Rate limiting configuration."""

    enabled: bool = True
    storage_uri: str | None = None  # Defaults to the Redis rate limit DB
    default: str = "60/minute"
    analysis: str = "10/minute"


class LoggingSettings(BaseModel):
    """Logging configuration settings."""

    level: str = "INFO"
    format: str = "json"
    file: str | None = None


class OpenAISettings(BaseModel):
    """OpenAI-compatible chat completions configuration."""

    url: str = "https://api.openai.com/v1"
    model: str = "gpt-4o-mini"
    timeout: float = 45.0
    max_retries: int = 2
    requests_per_minute: float = 60.0


class OllamaSettings(BaseModel):
    """Ollama LLM service configuration."""

    url: str = "http://localhost:11434"
    model: str = "llama3.2-vision"
    timeout: float = 60.0
    max_retries: int = 1


class LLMFallbackSettings(BaseModel):
    """LLM fallback behavior configuration."""

    enabled: bool = False
    secondary_provider: str = "ollama"


class LLMCacheSettings(BaseModel):
    """LLM response caching configuration."""

    enabled: bool = False
    ttl: int = 3600


class LLMSettings(BaseModel):
    """LLM (scoring oracle) configuration settings."""

    enabled: bool = True
    provider: str = "openai"
    openai: OpenAISettings = OpenAISettings()
    ollama: OllamaSettings = OllamaSettings()
    fallback: LLMFallbackSettings = LLMFallbackSettings()
    cache: LLMCacheSettings = LLMCacheSettings()


class OpenFoodFactsSettings(BaseModel):
    """Open Food Facts client configuration."""

    url: str = "https://world.openfoodfacts.org"
    timeout: float = 10.0
    image_lookup_timeout: float = 5.0
    cache_ttl: int = 7 * 24 * 60 * 60
    user_agent: str = "ScanScore/0.1 (+https://github.com/scanscore)"


class AnalysisSettings(BaseModel):
    """Product analysis configuration."""

    max_alternatives: int = 3
    enrich_alternative_images: bool = True


class ComparisonSettings(BaseModel):
    """Comparison engine configuration."""

    oracle_timeout: float = 45.0
    enrich_nutrition: bool = True


class HistorySettings(BaseModel):
    """Scan history storage configuration."""

    backend: str = "redis"  # "redis" or "memory"
    max_entries: int = 50
    key_prefix: str = "scanscore:history"


# =============================================================================
# Main Settings Class
# =============================================================================


class Settings(BaseSettings):
    """Application settings with YAML + environment variable support.

    Priority (highest to lowest):
    1. Values passed to Settings()
    2. Environment variables (nested with '__', e.g. LLM__PROVIDER=ollama)
    3. .env file
    4. YAML files (base, then config/environments/{APP_ENV}/)
    5. Defaults in code
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
        case_sensitive=False,
        env_nested_delimiter="__",
    )

    APP_ENV: str = "development"

    app: AppSettings = AppSettings()
    server: ServerSettings = ServerSettings()
    api: ApiSettings = ApiSettings()
    redis: RedisSettings = RedisSettings()
    rate_limiting: RateLimitingSettings = RateLimitingSettings()
    logging: LoggingSettings = LoggingSettings()
    llm: LLMSettings = LLMSettings()
    open_food_facts: OpenFoodFactsSettings = OpenFoodFactsSettings()
    analysis: AnalysisSettings = AnalysisSettings()
    comparison: ComparisonSettings = ComparisonSettings()
    history: HistorySettings = HistorySettings()

    # Secrets (.env / environment only)
    OPENAI_API_KEY: str = ""
    REDIS_PASSWORD: str = ""

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert the YAML source below env and .env."""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            MultiYamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    # =========================================================================
    # Computed Fields
    # =========================================================================

    def _build_redis_url(self, db: int) -> str:
        """Build a Redis URL: redis://[user:password@]host:port/db."""
        auth_part = ""
        if self.redis.user and self.REDIS_PASSWORD:
            auth_part = f"{self.redis.user}:{self.REDIS_PASSWORD}@"
        elif self.REDIS_PASSWORD:
            auth_part = f":{self.REDIS_PASSWORD}@"
        elif self.redis.user:
            auth_part = f"{self.redis.user}@"

        return f"redis://{auth_part}{self.redis.host}:{self.redis.port}/{db}"

    @property
    def redis_cache_url(self) -> str:
        """Redis URL for caching and scan history."""
        return self._build_redis_url(self.redis.cache_db)

    @property
    def rate_limit_storage_uri(self) -> str:
        """Storage backend URI for SlowAPI."""
        if self.rate_limiting.storage_uri:
            return self.rate_limiting.storage_uri
        return self._build_redis_url(self.redis.rate_limit_db)

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.APP_ENV == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.APP_ENV == "production"

    @property
    def is_testing(self) -> bool:
        """Check if running in test environment."""
        return self.APP_ENV == "test"


@lru_cache
def get_settings() -> Settings:
    """Get the cached settings instance."""
    return Settings()
