"""
Configuration settings for ChallengeForge
"""
from typing import List, Optional, Union
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator


class Settings(BaseSettings):
    """Application settings"""

    # Project Info
    PROJECT_NAME: str = "ChallengeForge"
    VERSION: str = "1.0.0"
    APP_ENV: str = Field(default="development")
    DEBUG: bool = Field(default=True)

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_JSON: bool = Field(default=False)

    # Database (no URL means the in-memory store)
    DATABASE_URL: Optional[str] = Field(default=None)

    # Repository retry policy
    REPOSITORY_MAX_RETRIES: int = Field(default=3, ge=0)
    REPOSITORY_RETRY_BASE_DELAY: float = Field(default=0.5, ge=0)
    REPOSITORY_RETRY_MAX_DELAY: Optional[float] = Field(default=5.0)
    REPOSITORY_OPERATION_TIMEOUT: Optional[float] = Field(default=None)

    # Search defaults
    SEARCH_DEFAULT_LIMIT: int = Field(default=10, ge=1)
    SEARCH_MAX_LIMIT: int = Field(default=100, ge=1)

    # External AI provider (OpenAI-compatible chat completions)
    AI_API_KEY: str = Field(default="")
    AI_API_BASE: str = "https://api.openai.com/v1"
    AI_MODEL: str = "gpt-4o-mini"
    AI_TIMEOUT: float = Field(default=60.0)

    # Circuit breaker
    CIRCUIT_FAILURE_THRESHOLD: int = Field(default=5, ge=1)
    CIRCUIT_ROLLING_WINDOW_SECONDS: float = Field(default=60.0, gt=0)
    CIRCUIT_RECOVERY_TIMEOUT_SECONDS: float = Field(default=30.0, ge=0)
    CIRCUIT_HALF_OPEN_MAX_CALLS: int = Field(default=1, ge=1)
    CIRCUIT_CALL_TIMEOUT: Optional[float] = Field(default=None)
    CIRCUIT_IGNORED_ERROR_CODES: Union[str, List[str]] = Field(
        default="rate_limit_exceeded,tokens_exceeded,context_length_exceeded"
    )

    @field_validator('CIRCUIT_IGNORED_ERROR_CODES', mode='before')
    @classmethod
    def parse_ignored_error_codes(cls, v):
        """Parse ignored error codes from string or list"""
        if isinstance(v, str):
            return [code.strip() for code in v.split(",") if code.strip()]
        elif isinstance(v, (list, tuple, set, frozenset)):
            return [str(code) for code in v]
        return []

    # Event bus
    EVENT_BUS_RECORD_HISTORY: bool = Field(default=False)
    EVENT_BUS_HISTORY_LIMIT: int = Field(default=1000, ge=1)
    EVENT_BUS_DEAD_LETTER_ENABLED: bool = Field(default=True)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


# Create settings instance
settings = Settings()
