"""
Application configuration module.
Loads configuration from environment variables and provides validation.
"""

import json
from decimal import Decimal, InvalidOperation
from functools import lru_cache
from typing import List, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application Settings
    app_name: str = Field(default="AgroLink Finance API")
    app_version: str = Field(default="0.1.0")
    debug: bool = Field(default=False)
    environment: str = Field(default="development")

    # Server Configuration
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    # Database Configuration
    database_url: str = Field(default="sqlite+aiosqlite:///./agrofinance.db")
    database_pool_size: int = Field(default=10)
    database_max_overflow: int = Field(default=20)

    # Redis Configuration
    redis_url: str = Field(default="redis://localhost:6379/0")
    redis_enabled: bool = Field(default=False)

    # Security Settings
    jwt_secret_key: str = Field(default="change-me")
    jwt_algorithm: str = Field(default="HS256")
    access_token_expire_minutes: int = Field(default=60)

    # CORS Settings
    cors_origins: List[str] = Field(default_factory=list)
    cors_allow_credentials: bool = Field(default=True)
    cors_allow_methods: List[str] = Field(default_factory=lambda: ["*"])
    cors_allow_headers: List[str] = Field(default_factory=lambda: ["*"])

    # Logging Configuration
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")

    # Rate Limiting
    rate_limit_enabled: bool = Field(default=False)
    rate_limit_per_minute: int = Field(default=120)

    # Finance Settings
    commission_rate: Decimal = Field(
        default=Decimal("0.15"),
        description="Platform markup applied to listing prices, as a fraction",
    )
    driver_flat_rate: Decimal = Field(
        default=Decimal("300"),
        description="Default payout per completed delivery",
    )
    currency: str = Field(default="LKR")

    # Report Branding
    report_brand_name: str = Field(default="AgroLink")
    report_tagline: str = Field(default="Agricultural Technology Solutions")
    report_phone: str = Field(default="+94 71 920 7688")
    report_website: str = Field(default="www.AgroLink.org")
    report_address: str = Field(default="States Rd, Colombo 04, Sri Lanka")

    @field_validator("cors_origins", "cors_allow_methods", "cors_allow_headers", mode="before")
    def parse_list_fields(cls, v: Union[str, List[str]]) -> List[str]:
        """Parse list fields from string or list."""
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                return [v]
        return v

    @field_validator("commission_rate", mode="before")
    def parse_commission_rate(cls, v):
        """Treat a missing, invalid or negative commission rate as zero."""
        try:
            rate = Decimal(str(v))
        except (InvalidOperation, TypeError, ValueError):
            return Decimal("0")
        if not rate.is_finite() or rate < 0:
            return Decimal("0")
        return rate

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"

    @property
    def is_test(self) -> bool:
        """Check if running in test mode."""
        return self.environment == "test"

    @property
    def is_sqlite(self) -> bool:
        """Check if the configured database is SQLite."""
        return self.database_url.startswith("sqlite")


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Application settings instance.
    """
    return Settings()


# Create a global settings instance
settings = get_settings()
