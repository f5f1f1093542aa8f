"""Registry configuration."""

from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
VALIDATION_LEVELS = ("strict", "warn", "skip")


class Settings(BaseSettings):
    """Registry settings loaded from environment variables."""

    # Environment
    environment: str = "development"  # development, production

    # Logging
    log_level: str = "INFO"
    log_json: bool = False  # JSON lines for log aggregation, on by default in production

    # Catalog self-check run by apksig.core.startup
    # Options: "strict" (raise on failure), "warn" (log and continue), "skip"
    catalog_validation: str = "strict"

    model_config = SettingsConfigDict(
        env_prefix="APKSIG_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level {value!r}, expected one of {', '.join(LOG_LEVELS)}")
        return level

    @field_validator("catalog_validation")
    @classmethod
    def _check_catalog_validation(cls, value: str) -> str:
        level = value.lower()
        if level not in VALIDATION_LEVELS:
            raise ValueError(
                f"Unknown catalog validation level {value!r}, expected one of {', '.join(VALIDATION_LEVELS)}"
            )
        return level

    @model_validator(mode="after")
    def _production_log_json(self) -> "Settings":
        if self.is_production and "log_json" not in self.model_fields_set:
            self.log_json = True
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
