"""
Site Search Settings

Centralized configuration using Pydantic Settings for type safety and validation.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Search settings with validation and type safety."""

    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="SITE_SEARCH_", extra="ignore"
    )

    # Required settings
    engine_key: str

    # Search API settings
    api_endpoint: str = (
        "https://search-api.swiftype.com/api/v1/public/engines/search.json"
    )
    document_type: str = "page"
    results_per_page: int = 10
    filter_types: str = "docs,developer,opensource"

    # Transport settings
    request_timeout: float = 30.0
    max_retries: int = 2
    retry_backoff_factor: float = 1.0

    # Session settings
    debounce_ms: int = 500

    # Rendering settings
    site_origin: str = "https://docs.newrelic.com"
    source_tag_suffix: str = ".newrelic"

    # Logging settings
    log_dir: str = "logs"

    @property
    def filter_types_list(self) -> list[str]:
        """Get filter_types as a parsed list."""
        if not self.filter_types:
            return []
        return [
            value.strip() for value in self.filter_types.split(",") if value.strip()
        ]

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()  # type: ignore
