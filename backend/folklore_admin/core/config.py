"""Application configuration using pydantic-settings.

All environment variables are read through the ``settings`` object rather
than ``os.getenv()`` so that values are validated once at startup.
"""

from functools import lru_cache
from typing import List, Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SECRET_KEY = "change-me-in-production"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str = "sqlite:///./data/folklore.db"
    sql_echo: bool = False

    # Security
    secret_key: str = DEFAULT_SECRET_KEY
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 240  # 4 hours
    password_reset_expire_minutes: int = 30

    # CORS - comma-separated origins or "*" for development only
    cors_origins: str = "http://localhost:5173,http://localhost:3000"

    # ==========================================================================
    # Email/SMTP
    # ==========================================================================
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    smtp_from_email: str = "info@folkloregarden.cz"
    smtp_from_name: str = "Folklore Garden"
    smtp_use_tls: bool = True

    # ==========================================================================
    # Links sent to customers and staff
    # ==========================================================================
    payment_gateway_url: str = "https://payments.folkloregarden.cz/pay"
    admin_base_url: str = "http://localhost:5173"

    # Server
    debug: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    timezone: str = "Europe/Prague"

    # API
    api_prefix: str = "/api"

    # Rate limiting
    rate_limit_enabled: bool = True

    # Events
    default_event_time: str = "18:00"

    @field_validator("secret_key")
    @classmethod
    def validate_secret_key(cls, v: str) -> str:
        import warnings

        if v == DEFAULT_SECRET_KEY:
            warnings.warn(
                "Using default SECRET_KEY is insecure! Set SECRET_KEY environment variable.",
                UserWarning,
                stacklevel=2,
            )
        elif len(v) < 32:
            warnings.warn(
                "SECRET_KEY should be at least 32 characters for security.",
                UserWarning,
                stacklevel=2,
            )
        return v

    @field_validator("default_event_time")
    @classmethod
    def validate_event_time(cls, v: str) -> str:
        hours, _, minutes = v.partition(":")
        if not (hours.isdigit() and minutes.isdigit() and int(hours) < 24 and int(minutes) < 60):
            raise ValueError(f"default_event_time must be HH:MM, got {v!r}")
        return v

    @model_validator(mode="after")
    def validate_production_settings(self) -> "Settings":
        """Refuse to start in production with an unsafe secret key."""
        import warnings

        if not self.debug:
            if self.secret_key == DEFAULT_SECRET_KEY:
                raise ValueError(
                    "FATAL: Cannot start in production mode with default SECRET_KEY. "
                    "Set a secure SECRET_KEY environment variable (minimum 32 characters)."
                )
            if len(self.secret_key) < 32:
                raise ValueError(
                    f"FATAL: SECRET_KEY must be at least 32 characters in production mode "
                    f"(current length: {len(self.secret_key)})."
                )

            localhost_patterns = ["localhost", "127.0.0.1", "0.0.0.0"]
            origins = [o.strip() for o in self.cors_origins.split(",")]
            localhost_origins = [o for o in origins if any(p in o for p in localhost_patterns)]
            if localhost_origins:
                warnings.warn(
                    f"CORS origins contain localhost URLs in production mode: {localhost_origins}.",
                    UserWarning,
                    stacklevel=2,
                )

        return self

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins into a list, filtering localhost in production."""
        if self.cors_origins == "*":
            return ["*"]

        origins = [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

        if not self.debug:
            localhost_patterns = ["localhost", "127.0.0.1", "0.0.0.0"]
            origins = [o for o in origins if not any(p in o for p in localhost_patterns)]

        return origins

    @property
    def email_configured(self) -> bool:
        return bool(self.smtp_host)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
