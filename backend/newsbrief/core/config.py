"""
Configuration management using Pydantic Settings.
All environment variables are loaded and validated here.
"""

from typing import List, Literal, Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ================================
    # Application Configuration
    # ================================
    APP_NAME: str = "NewsBrief"
    APP_ENV: Literal["development", "testing", "staging", "production"] = "development"
    DEBUG: bool = True
    SECRET_KEY: str = Field(..., min_length=32)

    # API Configuration
    API_PREFIX: str = "/api"
    ALLOWED_ORIGINS: str = (
        "http://localhost:5173,http://localhost:5174,"
        "http://127.0.0.1:5173,http://127.0.0.1:5174"
    )

    # Frontend base URL, used to build password reset links
    CLIENT_URL: str = "http://localhost:5173"

    @field_validator("ALLOWED_ORIGINS")
    @classmethod
    def parse_origins(cls, v: str) -> List[str]:
        """Parse comma-separated origins into list."""
        return [origin.strip() for origin in v.split(",") if origin.strip()]

    # ================================
    # Database Configuration
    # ================================
    DATABASE_URL: str = Field(..., description="SQLAlchemy async connection string")
    DB_ECHO: bool = False
    DB_POOL_SIZE: int = 20
    DB_MAX_OVERFLOW: int = 10

    # ================================
    # JWT Authentication
    # ================================
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 43200  # 30 days

    # Password reset tokens
    RESET_TOKEN_EXPIRE_MINUTES: int = 30

    # ================================
    # News Provider (NewsData.io)
    # ================================
    NEWS_API_KEY: Optional[str] = None
    NEWS_API_BASE_URL: str = "https://newsdata.io/api/1"
    NEWS_API_TIMEOUT: float = 10.0
    NEWS_PAGE_SIZE: int = 10
    NEWS_DEFAULT_COUNTRY: str = "us"
    NEWS_LANGUAGE: str = "en"

    # ================================
    # AI Service Configuration
    # ================================
    ANTHROPIC_API_KEY: Optional[str] = None
    ANTHROPIC_MODEL: str = "claude-3-5-haiku-20241022"
    SUMMARY_MAX_TOKENS: int = 150
    SUMMARY_TEMPERATURE: float = 0.3
    SUMMARY_TIMEOUT: float = 20.0

    # ================================
    # Email Configuration (SMTP)
    # ================================
    SMTP_HOST: Optional[str] = None
    SMTP_PORT: int = 587
    SMTP_USER: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    SMTP_TIMEOUT: float = 15.0
    FROM_EMAIL: Optional[str] = None
    FROM_NAME: str = "NewsBrief"

    # ================================
    # Content Configuration
    # ================================
    SEED_ON_STARTUP: bool = True
    DEFAULT_PAGE_LIMIT: int = 20
    MAX_PAGE_LIMIT: int = 100

    # ================================
    # Logging Configuration
    # ================================
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    LOG_FORMAT: Literal["json", "text"] = "json"

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.APP_ENV == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.APP_ENV == "production"

    @property
    def is_testing(self) -> bool:
        return self.APP_ENV == "testing"


# Global settings instance
settings = Settings()
