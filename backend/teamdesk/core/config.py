"""Application settings and environment configuration loading."""

from __future__ import annotations

from pathlib import Path
from typing import Self

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

BACKEND_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_ENV_FILE = BACKEND_ROOT / ".env"
DEFAULT_ADMIN_ROLES = "Manager Technique,Responsable Technique,Responsable Marketing"


class Settings(BaseSettings):
    """Typed runtime configuration sourced from environment variables."""

    model_config = SettingsConfigDict(
        # Load `backend/.env` regardless of current working directory.
        env_file=[DEFAULT_ENV_FILE, ".env"],
        env_file_encoding="utf-8",
        extra="ignore",
    )

    environment: str = "dev"

    # Hosted record store (REST + auth endpoints share the same base URL).
    record_store_url: str = ""
    record_store_anon_key: str = ""
    # Only needed for admin user management through the auth provider.
    record_store_service_key: str = ""
    request_timeout_seconds: float = Field(default=10.0, gt=0)

    # Pause after each accepted write so the next read observes it.
    write_settle_delay_seconds: float = Field(default=0.5, ge=0)

    # Profile roles allowed to manage other users.
    admin_roles: str = DEFAULT_ADMIN_ROLES
    default_profile_role: str = "User"

    cors_origins: str = ""

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"
    log_use_utc: bool = False
    request_log_slow_ms: int = Field(default=1000, ge=0)
    request_log_include_health: bool = False

    @model_validator(mode="after")
    def _defaults(self) -> Self:
        url = self.record_store_url.strip().rstrip("/")
        if not url:
            raise ValueError("RECORD_STORE_URL must be set and non-empty.")
        if not self.record_store_anon_key.strip():
            raise ValueError("RECORD_STORE_ANON_KEY must be set and non-empty.")
        self.record_store_url = url
        return self

    @property
    def admin_role_set(self) -> frozenset[str]:
        """Admin role labels parsed from the comma-separated setting."""
        return frozenset(role.strip() for role in self.admin_roles.split(",") if role.strip())


settings = Settings()
