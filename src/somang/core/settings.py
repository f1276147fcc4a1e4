"""Application settings and configuration.

This module defines all configuration options for the Somang Church website.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Values shipped in example env files; treated the same as "not configured".
PLACEHOLDER_BACKEND_URL = "https://placeholder.supabase.co"
PLACEHOLDER_BACKEND_KEY = "placeholder-key"


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Somang Church", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Hosted backend (data + auth)
    backend_url: str | None = Field(default=None, alias="SUPABASE_URL")
    backend_anon_key: str | None = Field(default=None, alias="SUPABASE_ANON_KEY")
    backend_http_timeout_seconds: float = Field(
        default=10.0,
        alias="BACKEND_HTTP_TIMEOUT_SECONDS",
    )
    posts_table: str = Field(default="posts", alias="POSTS_TABLE")
    admin_table: str = Field(default="admin_users", alias="ADMIN_TABLE")

    # Board presentation and admin provisioning
    preview_length: int = Field(default=150, alias="PREVIEW_LENGTH")
    min_password_length: int = Field(default=6, alias="MIN_PASSWORD_LENGTH")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def backend_available(self) -> bool:
        """Return True when both backend endpoint values are configured.

        Returns:
            False if either value is missing or still holds a placeholder
        """
        if not self.backend_url or not self.backend_anon_key:
            return False
        return (
            self.backend_url != PLACEHOLDER_BACKEND_URL
            and self.backend_anon_key != PLACEHOLDER_BACKEND_KEY
        )


settings = Settings()
