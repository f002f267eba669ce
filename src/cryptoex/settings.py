"""Application settings and configuration."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CRYPTOEX_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "cryptoex"
    env: str = "development"

    # Storage
    database_url: str = Field(
        default="sqlite:///./cryptoex.db",
        description="Database URL backing the key-value store",
    )
    database_echo: bool = Field(
        default=False,
        description="Echo SQL statements",
    )

    # Pages
    site_url: str | None = Field(
        default=None,
        description="Base page URL used to build referral links",
    )
    landing_page: str = Field(
        default="index.html",
        description="Page referral links point to",
    )
    login_page: str = Field(
        default="./login.html",
        description="Where unauthenticated visitors are sent",
    )
    ref_param: str = Field(
        default="ref",
        description="Query parameter carrying a referral code",
    )

    # Credentials
    min_password_length: int = Field(
        default=8,
        description="Minimum password length",
    )

    # Referrals
    ref_code_length: int = Field(
        default=8,
        description="Length of generated referral codes",
    )
    ref_code_max_attempts: int = Field(
        default=10,
        description="Attempts at drawing a referral code not used by another user",
    )
    ref_log_limit: int = Field(
        default=500,
        description="Entries kept per referral click/registration log",
    )
    ref_recent_limit: int = Field(
        default=10,
        description="Entries shown as recent in a referral summary",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_format: Literal["console", "json"] = Field(
        default="console",
        description="Log output format",
    )


# Global settings instance
settings = Settings()
