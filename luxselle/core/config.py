# luxselle/core/config.py

import os
from functools import lru_cache
from typing import List, Optional, Literal
from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings.
    Loads values from environment variables (.env file)
    """
    # Database settings
    DATABASE_URL: str = "sqlite+aiosqlite:///./luxselle.db"
    DB_ECHO: bool = False
    AUTO_CREATE_TABLES: bool = False

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    PORT: int = 8000
    CORS_ORIGINS: List[str] = ["http://localhost:5173", "http://localhost:3000"]

    # AI routing
    AI_ROUTING_MODE: Literal["dynamic", "openai", "perplexity"] = "dynamic"
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_MODEL: str = "gpt-4o-mini"
    PERPLEXITY_API_KEY: Optional[str] = None
    PERPLEXITY_SEARCH_MODEL: str = "sonar"
    PERPLEXITY_EXTRACTION_MODEL: str = "sonar"
    AI_WEB_SEARCH_TIMEOUT_SECONDS: float = 12.0
    AI_GENERATION_TIMEOUT_SECONDS: float = 10.0

    # Pricing analysis backend
    PRICING_PROVIDER: Literal["mock", "openai"] = "mock"

    # Business defaults (seed values for the organisation settings record)
    TARGET_MARGIN_PCT: float = 35.0
    LOW_STOCK_THRESHOLD: int = 2
    RECEIVE_SELL_MARKUP: float = 1.5
    FX_USD_TO_EUR: float = 0.92
    VAT_RATE_PCT: float = 20.0

    # Supplier imports
    IMPORT_MAX_FILE_MB: int = 10

    model_config = ConfigDict(
        env_file=os.environ.get('ENV_FILE', '.env') if os.path.exists('.env') else None,
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def store_backend(self) -> str:
        """Short name of the configured database backend."""
        return self.DATABASE_URL.split(":", 1)[0].split("+", 1)[0]


@lru_cache()
def get_settings():
    """Cached settings to avoid loading .env file for every request"""
    return Settings()


def clear_settings_cache():
    """Clear the settings cache - useful when switching between environments"""
    get_settings.cache_clear()
