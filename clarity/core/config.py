"""Configuration management for the Clarity intelligence engine."""

from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file (only if accessible)
try:
    load_dotenv()
except (PermissionError, OSError):
    # Read-only deployments may not expose .env; rely on the process environment
    pass


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    # Supabase configuration (required)
    SUPABASE_URL: str = Field(..., description="Supabase project URL")
    SUPABASE_SERVICE_ROLE_KEY: str = Field(..., description="Supabase service role key")

    # Generation credential. Optional so the service boots without it; asking then
    # fails with a configuration error instead of a generic one.
    ANTHROPIC_API_KEY: str | None = Field(default=None, description="Anthropic API key")

    # Environment
    CLARITY_ENV: str = Field(default="dev", description="Environment: dev, staging, prod, test")

    # Ask AI
    ASK_MODEL: str = Field(default="claude-sonnet-4-5-20250929", description="Model for Ask AI")
    ASK_MAX_TOKENS: int = Field(default=2048, description="Max output tokens per answer")
    ASK_TEMPERATURE: float = Field(default=0.2, description="Sampling temperature for answers")
    GENERATION_TIMEOUT_SECONDS: float = Field(
        default=120.0, description="Timeout for a single generation call"
    )
    ASK_SOURCE_LIMIT: int = Field(
        default=5, ge=1, le=5, description="Max sources returned per answer (at most 5)"
    )
    CONTEXT_MAX_RECORDS_PER_TYPE: int | None = Field(
        default=None,
        description="Keep only the latest N records of each kind in context (unset = all)",
    )

    # Chat history
    CHAT_HISTORY_DEFAULT_LIMIT: int = Field(default=20, description="Default history page size")

    # Media
    MEDIA_ROOT: str = Field(default="uploads", description="Directory holding uploaded media")
    MEDIA_STORAGE_BUCKET: str | None = Field(
        default=None, description="Supabase Storage bucket for media (overrides MEDIA_ROOT)"
    )

    # Content-type suggestion
    CLASSIFIER_MODEL: str = Field(
        default="claude-haiku-4-5-20251001", description="Model for media content classification"
    )
    CLASSIFIER_MAX_CHARS: int = Field(
        default=3000, description="Chars of extracted text sent for classification"
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings instance

    Raises:
        ValidationError: If required environment variables are missing
    """
    return Settings()
