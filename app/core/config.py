"""
Application configuration using Pydantic Settings.

Loads configuration from environment variables (.env file).
"""

from typing import List, Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Project Info
    PROJECT_NAME: str = "Adaptive Training Engine"
    VERSION: str = "0.1.0"
    AUTHORS: List[str] = ["Adaptive Training Engine contributors"]

    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_USER: str = "postgres"
    DATABASE_PASSWORD: str = "postgres"
    DATABASE_HOST: str = "localhost"
    DATABASE_PORT: int = 5432
    DATABASE_DBNAME: str = "adaptive_training"
    DATABASE_URL_OVERRIDE: Optional[str] = None

    # Engine
    WEIGHT_UNIT: Literal["lbs", "kg"] = "lbs"
    FATIGUE_LOOKBACK_DAYS: int = 7
    MODIFIER_COMBINATION: Literal["min", "multiply"] = "min"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    @property
    def DATABASE_URL(self) -> str:
        """SQLAlchemy URL; ``DATABASE_URL_OVERRIDE`` wins when set (e.g. sqlite for local runs)."""
        if self.DATABASE_URL_OVERRIDE:
            return self.DATABASE_URL_OVERRIDE
        return (f"postgresql://{self.DATABASE_USER}:{self.DATABASE_PASSWORD}@{self.DATABASE_HOST}"
                f":{self.DATABASE_PORT}"
                f"/{self.DATABASE_DBNAME}")


# Global settings instance
settings = Settings()
