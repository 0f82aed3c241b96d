"""
Content Ranking Engine - Configuration
"""
from pathlib import Path
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Paths
    BASE_DIR: Path = Path(__file__).parent
    DATA_DIR: Path = Field(default_factory=lambda: Path(__file__).parent / "data")
    DATABASE_PATH: Path = Field(default_factory=lambda: Path(__file__).parent / "data" / "marketplace.db")
    LOG_DIR: Path = Field(default_factory=lambda: Path(__file__).parent / "data" / "logs")

    # Database
    DATABASE_ECHO: bool = Field(default=False, description="Log every SQL statement")

    # Logging
    LOG_LEVEL: str = Field(default="INFO")

    # Ranking
    RANKING_MAX_POOL_SIZE: int = Field(default=2000, description="Upper bound on candidates fetched per listing")
    RANKING_DEFAULT_PAGE_SIZE: int = Field(default=20)

    # Promotions
    PROMOTION_MAX_DAYS: int = Field(default=90, description="Longest single purchase, in days")
    PROMOTION_MAX_WINDOW_DAYS: int = Field(default=365, description="Longest extended window, in days")
    PROMOTION_REPORT_INTERVAL_MINUTES: int = Field(default=60)

    # API
    API_HOST: str = Field(default="0.0.0.0")
    API_PORT: int = Field(default=8000)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


# Global settings instance
settings = Settings()


def ensure_directories():
    """Ensure all required directories exist."""
    dirs = [
        settings.DATA_DIR,
        settings.LOG_DIR,
    ]
    for dir_path in dirs:
        dir_path.mkdir(parents=True, exist_ok=True)
