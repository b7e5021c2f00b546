"""
Application Configuration.

Pydantic Settings model for the accessgate auth layer.
All configuration is loaded from environment variables and .env files.
Inject an AppConfig instance via dependency injection where needed.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Optional

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings

from accessgate.models.enums import Role


class AppConfig(BaseSettings):
    """Central configuration loaded from environment variables and defaults."""

    # --- Supabase ---
    SUPABASE_URL: str = ""
    SUPABASE_ANON_KEY: SecretStr = SecretStr("")
    PROFILES_TABLE: str = "profiles"
    PASSWORD_RESET_REDIRECT_URL: str = ""

    # --- Build / dev impersonation ---
    APP_ENV: str = "production"
    DEV_AUTO_LOGIN: bool = False
    DEV_DEFAULT_ROLE: Role = Role.SUPER_ADMIN

    # --- Logging ---
    LOG_FILE: str = "accessgate.log"
    LOG_LEVEL: str = "INFO"
    LOG_MAX_BYTES: int = 5_242_880  # 5 MB
    LOG_BACKUP_COUNT: int = 3

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @property
    def is_development(self) -> bool:
        """``True`` for development builds or when the auto-login override is set.

        Dev impersonation is only wired into the session layer when this
        holds; release builds never construct the fixture source.
        """
        return self.APP_ENV.strip().lower() == "development" or self.DEV_AUTO_LOGIN

    @property
    def supabase_configured(self) -> bool:
        return bool(self.SUPABASE_URL and self.SUPABASE_ANON_KEY.get_secret_value())

    @model_validator(mode="after")
    def _warn_missing_env(self) -> "AppConfig":
        """Emit startup warnings for configuration worth knowing about.

        Pydantic silently falls back to defaults when ``.env`` is missing,
        so operators get a log line instead of a mystery.
        """
        _log = logging.getLogger("accessgate.config")

        if not Path(".env").exists():
            _log.warning(
                "No .env file found; all configuration loaded from "
                "environment variables or defaults."
            )

        if not self.supabase_configured:
            _log.warning(
                "SUPABASE_URL or SUPABASE_ANON_KEY is empty; identity "
                "provider calls will fail with a network error."
            )

        if self.is_development:
            _log.warning(
                "Development build: dev-mode impersonation is available "
                "(APP_ENV=%s, DEV_AUTO_LOGIN=%s).",
                self.APP_ENV,
                self.DEV_AUTO_LOGIN,
            )

        return self


# ---------------------------------------------------------------------------
# Module-level singleton factory
# ---------------------------------------------------------------------------

_config_instance: Optional[AppConfig] = None
_config_lock: threading.Lock = threading.Lock()


def get_config() -> AppConfig:
    """Return a cached ``AppConfig`` singleton.

    Uses a check-lock-check pattern so the fast path skips the lock.
    Prefer constructor injection of ``AppConfig`` in new code.
    """
    global _config_instance
    if _config_instance is None:
        with _config_lock:
            if _config_instance is None:
                _config_instance = AppConfig()
    return _config_instance


def reset_config() -> None:
    """Drop the cached singleton so the next ``get_config()`` re-reads the environment."""
    global _config_instance
    with _config_lock:
        _config_instance = None
