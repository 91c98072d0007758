"""
MiEspejo Backend - Application Configuration
=============================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or a .env file),
       validates types and provides a module-level `settings` value.
Who:   Passed explicitly to create_app(); read by the entry point and logging setup.
When:  Loaded once at import time; required values are checked before serving.

The Supabase URL and service role key have empty defaults so that importing
the package never fails. validate_required() is what turns their absence into
a fatal startup error.
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from miespejo.exceptions import ConfigurationError


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Instances are frozen: configuration does not change after startup.
    """

    # ── Supabase ──────────────────────────────────────────────────────────
    # Project URL, e.g. https://<project>.supabase.co
    supabase_url: str = Field(default="", description="Supabase project URL")

    # service_role key: the backend writes on behalf of users and bypasses RLS
    supabase_service_role_key: str = Field(
        default="",
        description="Supabase service role key",
    )

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000, ge=1, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    # ── CORS ──────────────────────────────────────────────────────────────
    # Comma-separated origins; "*" lets any origin call the API
    cors_origins: str = Field(default="*")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
        "frozen": True,
    }

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    def validate_required(self) -> None:
        """
        What:  Checks that the Supabase connection settings are present.
        When:  Before the server starts accepting requests.
        Raises ConfigurationError listing every missing variable.
        """
        missing = []
        if not self.supabase_url:
            missing.append("SUPABASE_URL")
        if not self.supabase_service_role_key:
            missing.append("SUPABASE_SERVICE_ROLE_KEY")
        if missing:
            raise ConfigurationError(
                message=(
                    "Las variables " + " y/o ".join(missing) + " no están configuradas."
                ),
                missing=missing,
            )


settings = Settings()
