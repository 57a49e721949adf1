from decimal import Decimal
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings

_PROJECT_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _PROJECT_DIR / ".env",
    ".env",
)


class Settings(BaseSettings):
    """Back-office settings loaded from environment variables."""

    app_title: str = "Retail Back-Office"

    # Remote data backend
    api_base_url: str = "http://localhost:8080/api"
    api_timeout: float = 10.0                # seconds, per request
    api_token: str = ""                      # sent as a Bearer token when set

    # Views and aggregation
    default_page_size: int = 10
    top_n: int = 5
    invoice_tax_rate: Decimal = Decimal("0.19")

    # Logging: per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_http: str = "WARNING"          # httpx / httpcore, outbound HTTP
    log_level_store: str = "INFO"            # Domain stores and repositories

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
    }


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance; reads .env once."""
    return Settings()
