from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings"""

    # Redis
    REDIS_URL: str = Field(
        "redis://localhost:6379",
        validation_alias=AliasChoices("RESEARCH_REDIS_URL", "REDIS_URL"),
    )
    REDIS_MAX_RETRIES: int = 10
    REDIS_BACKOFF_BASE: float = 0.05  # seconds
    REDIS_BACKOFF_CAP: float = 3.0  # seconds

    # Security
    ADMIN_KEY: Optional[str] = None

    # Rate Limiting
    AUTH_RATE_LIMIT_PER_MINUTE: int = 30

    # Domain
    BASE_URL: str = "http://localhost:8000"

    # External sources
    ORCID_ID: Optional[str] = None
    OPENREVIEW_ID: Optional[str] = None
    OPENREVIEW_USERNAME: Optional[str] = None
    OPENREVIEW_PASSWORD: Optional[str] = None
    HTTP_TIMEOUT: float = 10.0

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
