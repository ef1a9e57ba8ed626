"""Application configuration."""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Binance API (spot, public endpoints only)
    binance_base_url: str = "https://api.binance.com"
    market_data_timeout: float = 15.0

    # Text analysis API (OpenAI-compatible chat completions)
    analysis_api_url: str = "https://api.deepseek.com/v1/chat/completions"
    analysis_api_key: str = ""
    analysis_model: str = "deepseek-chat"
    analysis_timeout: float = 20.0
    analysis_temperature: float = 0.7
    analysis_max_tokens: int = 400

    # Request defaults
    default_symbol: str = "SOLUSDT"
    default_timeframe: str = "30s"
    reference_symbols: list[str] = ["BTCUSDT", "ETHUSDT", "BNBUSDT"]

    # Cache TTLs (milliseconds)
    klines_cache_ttl_ms: int = 10_000
    symbols_cache_ttl_ms: int = 5 * 60 * 1000
    bars_cache_ttl_ms: int = 10_000

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
