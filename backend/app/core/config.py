"""
Application configuration using Pydantic Settings.

Environment-based infrastructure switching is controlled by the ENVIRONMENT variable.
"""

from functools import lru_cache
from typing import List, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# lastMessage preview used when a message carries only an image
DEFAULT_IMAGE_PLACEHOLDER = "📷 Image"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ===========================================
    # Environment
    # ===========================================
    ENVIRONMENT: Literal["local", "test"] = "local"
    DEBUG: bool = True

    # ===========================================
    # Database
    # ===========================================
    DATABASE_URL: str = "sqlite+aiosqlite:///./chat.db"

    # ===========================================
    # Auth
    # ===========================================
    # mock: bearer token is the user id
    # local: HS256 JWT whose "sub" claim is the user id
    AUTH_PROVIDER: Literal["mock", "local"] = "mock"
    LOCAL_JWT_SECRET: str = ""
    LOCAL_JWT_ISSUER: str = "chat-relay-local"
    LOCAL_JWT_EXPIRE_MINUTES: int = 60 * 24 * 7

    # ===========================================
    # Server
    # ===========================================
    HOST: str = "0.0.0.0"
    PORT: int = 5000
    ALLOWED_ORIGINS: List[str] = Field(default=["*"])

    # ===========================================
    # Presence
    # ===========================================
    # Idle sessions are reaped after this many seconds (0 = never)
    PRESENCE_SESSION_TIMEOUT_SECONDS: int = 0
    PRESENCE_REAP_INTERVAL_SECONDS: int = 30

    # ===========================================
    # Messages
    # ===========================================
    MESSAGE_IMAGE_PLACEHOLDER: str = DEFAULT_IMAGE_PLACEHOLDER

    # ===========================================
    # Realtime
    # ===========================================
    # Queued frames a session may fall behind by before it is dropped
    REALTIME_OUTBOX_MAX_FRAMES: int = 1000

    @property
    def is_test(self) -> bool:
        """Check if running in test environment."""
        return self.ENVIRONMENT == "test"

    @property
    def reaper_enabled(self) -> bool:
        return self.PRESENCE_SESSION_TIMEOUT_SECONDS > 0


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache ensures settings are loaded only once.
    """
    return Settings()
