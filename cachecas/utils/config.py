# ==============================================================================
# Application Configuration
# ==============================================================================
"""
Configuration management using pydantic-settings.

All configuration is loaded from environment variables, with support for
.env files via python-dotenv.
"""

from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env file before any settings are instantiated
load_dotenv()


class ValkeySettings(BaseSettings):
    """Valkey (Redis-compatible) connection settings."""

    model_config = SettingsConfigDict(env_prefix="VALKEY_")

    host: str = Field(default="localhost", description="Valkey host")
    port: int = Field(default=6379, description="Valkey port")
    password: Optional[str] = Field(default=None, description="Valkey password")
    db: int = Field(default=0, description="Valkey database number")
    ssl: bool = Field(default=False, description="Use SSL/TLS connection")

    # Transport tuning
    socket_timeout: int = Field(default=10, description="Socket timeout in seconds")
    retries: int = Field(
        default=10, description="Transport retries for connection/timeout errors"
    )
    health_check_interval: int = Field(
        default=30, description="Connection health check interval in seconds"
    )

    @property
    def url(self) -> str:
        """Build Valkey connection URL."""
        scheme = "rediss" if self.ssl else "redis"
        if self.password:
            return f"{scheme}://:{self.password}@{self.host}:{self.port}/{self.db}"
        return f"{scheme}://{self.host}:{self.port}/{self.db}"


class ClientSettings(BaseSettings):
    """Cache client behavior settings.

    Conflict retry is unbounded with no delay unless conflict_max_attempts is
    set. The wait bounds feed an exponential backoff between attempts.
    """

    model_config = SettingsConfigDict(env_prefix="CACHE_")

    event_source: str = Field(
        default="Cache", description="Source prefix for published events"
    )
    default_ttl_seconds: Optional[int] = Field(
        default=None, description="TTL applied by set/add when none is given"
    )
    conflict_max_attempts: Optional[int] = Field(
        default=None,
        ge=1,
        description="Maximum CAS attempts per update (unset = retry until stored)",
    )
    conflict_wait_min: float = Field(
        default=0.0, ge=0.0, description="Minimum delay between conflict retries (seconds)"
    )
    conflict_wait_max: float = Field(
        default=0.0, ge=0.0, description="Maximum delay between conflict retries (seconds)"
    )


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        extra="ignore",
    )

    # Nested settings
    valkey: ValkeySettings = Field(default_factory=ValkeySettings)
    client: ClientSettings = Field(default_factory=ClientSettings)

    # General settings
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="WARNING", description="Logging level")


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Settings are loaded once and cached for subsequent calls.
    """
    return Settings()
