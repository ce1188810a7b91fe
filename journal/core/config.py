from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


BASE_DIR = Path(__file__).resolve().parent.parent.parent
ENV_PATH = BASE_DIR / ".env"

# Load environment variables from .env if present
load_dotenv(ENV_PATH)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=ENV_PATH, case_sensitive=False, extra="ignore")

    app_env: str = Field("development", validation_alias="APP_ENV")
    app_host: str = Field("127.0.0.1", validation_alias="APP_HOST")
    app_port: int = Field(8000, validation_alias="APP_PORT")
    log_level: str = Field("INFO", validation_alias="LOG_LEVEL")

    default_exchange: str = Field("NSE", validation_alias="DEFAULT_EXCHANGE")
    default_broker: Optional[str] = Field(None, validation_alias="DEFAULT_BROKER")
    max_capital_per_trade_pct: float = Field(10.0, gt=0, le=100, validation_alias="MAX_CAPITAL_PER_TRADE_PCT")

    mf_api_url: str = Field("https://api.mfapi.in/mf", validation_alias="MF_API_URL")
    mf_cache_ttl_seconds: int = Field(24 * 60 * 60, gt=0, validation_alias="MF_CACHE_TTL_SECONDS")
    mf_nav_cache_ttl_seconds: int = Field(6 * 60 * 60, gt=0, validation_alias="MF_NAV_CACHE_TTL_SECONDS")
    http_timeout_seconds: float = Field(10.0, gt=0, validation_alias="HTTP_TIMEOUT_SECONDS")


@lru_cache()
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()  # type: ignore[call-arg]


def get_log_level(default: Optional[str] = None) -> str:
    """Convenience accessor for log level with optional override."""
    settings = get_settings()
    return settings.log_level or (default or "INFO")
