"""
Engine configuration management using Pydantic Settings.
"""
from functools import lru_cache
from typing import Any, Dict

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Engine settings loaded from environment variables.
    """
    model_config = SettingsConfigDict(
        env_prefix="SLIDEGRID_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "SlideGrid"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    ENVIRONMENT: str = Field(default="development", pattern="^(development|staging|production)$")
    LOG_LEVEL: str = "INFO"

    # Grid defaults
    LAYOUT_DEFAULT_COLUMNS: int = Field(default=12, ge=1)
    LAYOUT_DEFAULT_GAP: float = Field(default=16.0, ge=0)
    LAYOUT_DEFAULT_MARGIN: float = Field(default=32.0, ge=0)
    LAYOUT_MAX_COLUMNS: int = 24

    # Row height policy used when a grid has no explicit row count
    LAYOUT_BASELINE_ROWS: int = Field(default=6, ge=1)
    LAYOUT_MIN_ROW_HEIGHT: float = 80.0
    LAYOUT_MAX_ROW_HEIGHT: float = 200.0
    LAYOUT_SPAN_DAMPING: float = Field(default=0.8, gt=0, le=1)

    # Warning thresholds
    LAYOUT_LARGE_CONTENT_COUNT: int = 20
    LAYOUT_MAX_AREAS: int = 24

    # Optional JSON overrides loaded at startup
    LAYOUT_TEMPLATES_FILE: str | None = None
    LAYOUT_ENGINE_CONFIG_FILE: str | None = None

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return str(v).upper()

    @field_validator("LAYOUT_MAX_ROW_HEIGHT")
    @classmethod
    def check_row_height_bounds(cls, v: float, info) -> float:
        minimum = info.data.get("LAYOUT_MIN_ROW_HEIGHT", 0)
        if v < minimum:
            raise ValueError("LAYOUT_MAX_ROW_HEIGHT must not be below LAYOUT_MIN_ROW_HEIGHT")
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.ENVIRONMENT == "development"

    def get_row_height_policy(self) -> Dict[str, Any]:
        """Get the row height policy for grids without explicit rows."""
        return {
            "baseline_rows": self.LAYOUT_BASELINE_ROWS,
            "min_height": self.LAYOUT_MIN_ROW_HEIGHT,
            "max_height": self.LAYOUT_MAX_ROW_HEIGHT,
            "span_damping": self.LAYOUT_SPAN_DAMPING,
        }


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    """
    return Settings()


settings = get_settings()
