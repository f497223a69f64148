"""Runtime configuration read from the environment (and a local ``.env``)."""

import os
from functools import lru_cache
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

ScraperBackend = Literal["scrapingbee", "browser"]


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    scrapingbee_api_key: str = ""
    scrapingbee_endpoint: str = "https://app.scrapingbee.com/api/v1/"
    gemini_api_key: str = ""
    gemini_model: str = "gemini-1.5-flash"
    scraper: ScraperBackend = "scrapingbee"
    product_limit: int = Field(default=6, ge=1, le=50)
    max_concurrency: int = Field(
        default=6,
        ge=1,
        description="Upper bound on products enriched at the same time.",
    )
    scraper_timeout: float = Field(default=60.0, gt=0)
    log_level: str = "INFO"


# Settings field -> environment variable
_ENV_VARS = {
    "scrapingbee_api_key": "SCRAPINGBEE_API_KEY",
    "scrapingbee_endpoint": "SCRAPINGBEE_ENDPOINT",
    "gemini_api_key": "GEMINI_API_KEY",
    "gemini_model": "GEMINI_MODEL",
    "scraper": "CATALOG_SCRAPER",
    "product_limit": "CATALOG_PRODUCT_LIMIT",
    "max_concurrency": "CATALOG_MAX_CONCURRENCY",
    "scraper_timeout": "CATALOG_SCRAPER_TIMEOUT",
    "log_level": "LOG_LEVEL",
}


def load_settings() -> Settings:
    """Build :class:`Settings` from environment variables.

    Unset variables fall back to the model defaults.  Raises
    ``pydantic.ValidationError`` when a value is out of range.
    """
    values = {
        field: os.environ[var] for field, var in _ENV_VARS.items() if os.environ.get(var)
    }
    return Settings(**values)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    load_dotenv()
    return load_settings()
