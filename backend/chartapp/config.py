"""Application configuration."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables (CHART_*)."""

    model_config = SettingsConfigDict(
        env_prefix="CHART_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Tick simulation
    tick_interval: float = 1.0  # seconds between ticks
    tick_seed_timeframe: str = "1D"  # last prices start from this sequence's tail

    # External quote source (Yahoo-style chart API behind a CORS proxy)
    use_real_data: bool = False
    quote_base_url: str = "https://query1.finance.yahoo.com"
    quote_proxy_url: str = "https://corsproxy.io/?url="
    quote_timeout: float = 15.0

    # Logging
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
