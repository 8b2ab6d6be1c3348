"""
Configuration management.

The ``Settings`` dataclass reads configuration directly from environment
variables.  It is frozen and built once at process start by
``Settings.from_env``; the resulting instance is handed to the
repositories and services when the application is assembled in
``main.create_app``.  Nothing reads the environment after that point.
"""

import os
from dataclasses import dataclass, field
from typing import Tuple


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


def _env_list(name: str, default: str = "") -> Tuple[str, ...]:
    raw = os.getenv(name, default)
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    """Application settings."""

    project_name: str = "Member Registry API"
    api_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"
    log_file: str = ""

    # Tokens are signed with this secret.  Anyone holding it can mint
    # tokens for any user, so it must be overridden outside development.
    secret_key: str = "change_me"
    access_token_expire_minutes: int = 72 * 60

    # Path to the SQLite database file.  Relative paths are resolved
    # against the project root by ``core.db``.
    database_url: str = "member_registry.db"

    # Credentials of the administrator created on first start when the
    # users table is empty.  Both must be set for the bootstrap to run.
    default_admin_user: str = ""
    default_admin_password: str = ""

    recaptcha_secret_key: str = ""
    recaptcha_verify_url: str = "https://www.google.com/recaptcha/api/siteverify"
    recaptcha_score_threshold: float = 0.5
    recaptcha_timeout: float = 10.0

    allowed_origins: Tuple[str, ...] = field(default_factory=lambda: ("*",))
    app_host: str = "0.0.0.0"
    app_port: int = 8000

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables, falling back to defaults."""
        defaults = cls()
        return cls(
            project_name=os.getenv("PROJECT_NAME", defaults.project_name),
            api_version=os.getenv("API_VERSION", defaults.api_version),
            debug=_env_bool("DEBUG"),
            log_level=os.getenv("LOG_LEVEL", defaults.log_level),
            log_file=os.getenv("LOG_FILE", defaults.log_file),
            secret_key=os.getenv("JWT_SECRET", defaults.secret_key),
            access_token_expire_minutes=int(
                os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(defaults.access_token_expire_minutes))
            ),
            database_url=os.getenv("DATABASE_URL", defaults.database_url),
            default_admin_user=os.getenv("DEFAULT_ADMIN_USER", ""),
            default_admin_password=os.getenv("DEFAULT_ADMIN_PASSWORD", ""),
            recaptcha_secret_key=os.getenv("RECAPTCHA_SECRET_KEY", ""),
            recaptcha_verify_url=os.getenv("RECAPTCHA_VERIFY_URL", defaults.recaptcha_verify_url),
            recaptcha_score_threshold=float(
                os.getenv("RECAPTCHA_SCORE_THRESHOLD", str(defaults.recaptcha_score_threshold))
            ),
            recaptcha_timeout=float(os.getenv("RECAPTCHA_TIMEOUT", str(defaults.recaptcha_timeout))),
            allowed_origins=_env_list("ALLOWED_ORIGINS", "*"),
            app_host=os.getenv("APP_HOST", defaults.app_host),
            app_port=int(os.getenv("APP_PORT", str(defaults.app_port))),
        )
