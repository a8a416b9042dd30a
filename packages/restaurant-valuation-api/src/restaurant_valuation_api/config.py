"""
Service configuration.

Settings are read from the environment (prefix ``RESTAURANT_VALUATION_``) or an
optional ``.env`` file in the working directory.  Engine design constants
(terminal growth, projection horizon, factor magnitudes) are deliberately not
exposed here.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseSettings):
    LOG_LEVEL: str = Field(
        "INFO",
        description="Root log level: DEBUG, INFO, WARNING, ERROR",
    )
    LEDGER_DIR: str = Field(
        "ledgers",
        description="Directory holding one <restaurant_id>/ folder with sales.csv and expenses.csv per restaurant",
    )
    DEFAULT_SOURCE: str = Field(
        "ledger",
        description="Connector used when a request does not name one",
    )
    API_TITLE: str = Field(
        "Restaurant Valuation API",
        description="Title shown in the OpenAPI docs",
    )

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        if isinstance(v, str):
            v = v.strip().upper()
        if v not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {v!r}")
        return v

    model_config = SettingsConfigDict(
        env_prefix="RESTAURANT_VALUATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
