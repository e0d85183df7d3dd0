"""Application configuration."""

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Nominatim usage policy: no more than one request per second.
MIN_ATTEMPT_DELAY_SECONDS = 0.5
MIN_ENTITY_DELAY_SECONDS = 1.0

SEARCH_RADIUS_OPTIONS: tuple[int, ...] = (5, 10, 25, 50, 100)


class Settings(BaseSettings):
    """
    Application settings.

    Environment variables will be loaded and validated using Pydantic.
    """

    app_name: str = "FitFindr"
    version: str = "0.1.0"
    api_prefix: str = "/api/v1"

    # CORS Settings
    cors_origins: list[str] = ["*"]  # Default to allow all in development
    cors_allow_credentials: bool = False

    # Database Settings
    DATABASE_URL: str = "sqlite:///./fitfindr.db"

    # Redis Settings (geocoding response cache, disabled when unset)
    REDIS_URL: str | None = None

    # Logging Settings
    LOG_LEVEL: str = "INFO"
    JSON_LOGS: bool = True

    # Geocoding provider
    NOMINATIM_DOMAIN: str = "nominatim.openstreetmap.org"
    NOMINATIM_USER_AGENT: str = "FitFindr/1.0"
    GEOCODING_TIMEOUT: int = Field(default=10, gt=0)
    GEOCODING_RESULT_LIMIT: int = Field(default=5, ge=1, le=50)
    GEOCODING_COUNTRY_CODES: str = "us"
    GEOCODING_CACHE_TTL: int = Field(default=3600, ge=0)  # 1 hour

    # Bulk geocoding pacing
    GEOCODING_ATTEMPT_DELAY: float = MIN_ATTEMPT_DELAY_SECONDS
    GEOCODING_ENTITY_DELAY: float = MIN_ENTITY_DELAY_SECONDS

    # Search
    DEFAULT_SEARCH_RADIUS_MILES: int = 25

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="allow",  # Allow extra fields in environment
    )

    @field_validator("GEOCODING_ATTEMPT_DELAY")
    @classmethod
    def validate_attempt_delay(cls, value: float) -> float:
        """Keep the per-format delay at or above the provider minimum."""
        if value < MIN_ATTEMPT_DELAY_SECONDS:
            raise ValueError(
                f"GEOCODING_ATTEMPT_DELAY must be at least {MIN_ATTEMPT_DELAY_SECONDS}s"
            )
        return value

    @field_validator("GEOCODING_ENTITY_DELAY")
    @classmethod
    def validate_entity_delay(cls, value: float) -> float:
        """Keep the per-location delay at or above the provider minimum."""
        if value < MIN_ENTITY_DELAY_SECONDS:
            raise ValueError(
                f"GEOCODING_ENTITY_DELAY must be at least {MIN_ENTITY_DELAY_SECONDS}s"
            )
        return value

    @field_validator("DEFAULT_SEARCH_RADIUS_MILES")
    @classmethod
    def validate_default_radius(cls, value: int) -> int:
        """Default radius must be one of the offered radius options."""
        if value not in SEARCH_RADIUS_OPTIONS:
            raise ValueError(
                f"DEFAULT_SEARCH_RADIUS_MILES must be one of {SEARCH_RADIUS_OPTIONS}"
            )
        return value

    @model_validator(mode="after")
    def validate_origins(self) -> "Settings":
        """Validate CORS origins."""
        if self.cors_origins == ["*"]:
            self.cors_origins = [
                "http://localhost",
                "http://localhost:8000",
                "http://localhost:3000",
            ]
        return self

    @model_validator(mode="after")
    def use_test_configs_for_testing(self) -> "Settings":
        """Use the test database for tests to ensure isolation."""
        import os

        if os.getenv("TESTING") == "true":
            test_database_url = os.getenv("TEST_DATABASE_URL")
            if test_database_url:
                self.DATABASE_URL = test_database_url
            # Never hit a shared Redis from the test suite unless asked to
            test_redis_url = os.getenv("TEST_REDIS_URL")
            self.REDIS_URL = test_redis_url or None
        return self


# Create settings instance
settings = Settings()
