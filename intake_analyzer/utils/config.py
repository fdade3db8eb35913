"""
Configuration Management

Uses Pydantic Settings for environment-based configuration.
Loads from .env file automatically.
"""

from typing import Optional
from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Claude API (optional - analysis falls back to defaults without it)
    ANTHROPIC_API_KEY: Optional[str] = None
    CLAUDE_MODEL: str = "claude-sonnet-4-20250514"
    CLAUDE_MAX_OUTPUT_TOKENS: int = 16000
    CLAUDE_TEMPERATURE: float = 0.3

    # Retry policy (per-attempt timeout, attempt ceiling)
    CLAUDE_TIMEOUT: float = 120.0
    CLAUDE_MAX_RETRIES: int = 3
    RETRY_BASE_DELAY: float = 1.0
    RETRY_MAX_DELAY: float = 30.0

    # Confidence thresholds
    HIGH_CONFIDENCE_THRESHOLD: float = 0.7
    LOW_CONFIDENCE_THRESHOLD: float = 0.4

    # Prompt sizing
    ESTIMATED_OUTPUT_TOKENS: int = 4000
    MAX_EVIDENCE_ITEMS: int = 50

    # Application Settings
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"  # Ignore extra fields in .env file
        case_sensitive = False  # Allow both UPPERCASE and lowercase


@lru_cache
def get_settings() -> Settings:
    """Get or create cached settings instance."""
    return Settings()
