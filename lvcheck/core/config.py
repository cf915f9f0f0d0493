from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


BASE_DIR = Path(__file__).resolve().parent.parent.parent
ENV_PATH = BASE_DIR / ".env"

# Load environment variables from .env if present
load_dotenv(ENV_PATH)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=ENV_PATH, case_sensitive=False, extra="ignore")

    app_env: str = "development"
    app_host: str = "127.0.0.1"
    app_port: int = 8000
    log_level: str = "INFO"
    default_language: str = "en"

    history_page_size: int = Field(20, gt=0)

    price_api_url: str = "https://api.binance.com/api/v3/ticker/price"
    price_timeout_seconds: float = Field(5.0, gt=0)


@lru_cache()
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()

