"""Configuration loading for the storefront service.

Rules:
- Primary source: `storefront_config.json` at the project root.
- Overrides: environment variables, then optional text files under `config/`.
- Validation: Pydantic models enforce required fields and value constraints.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator


PROJECT_ROOT = Path(__file__).resolve().parents[1]
CONFIG_DIR = PROJECT_ROOT / "config"
ROOT_CONFIG_FILE = PROJECT_ROOT / "storefront_config.json"
logger = logging.getLogger(__name__)


def _read_config_file(rel_path: str) -> Optional[str]:
    path = CONFIG_DIR / rel_path
    try:
        if path.exists():
            return path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        # Recoverable: log and ignore the unreadable override
        logger.warning("Failed to read override %s: %s", path, e)
        return None
    return None


def _env(key: str, default: Optional[str] = None) -> Optional[str]:
    return os.environ.get(key, default)


class ApplicationConfig(BaseModel):
    name: str = Field(default="OWASP Juice Shop")
    domain: str

    @field_validator("domain")
    @classmethod
    def domain_must_be_hostname(cls, v: str) -> str:
        v = (v or "").strip()
        if not v or "@" in v or " " in v:
            raise ValueError("application.domain must be a bare host name")
        return v


class DatabaseConfig(BaseModel):
    url: str

    @field_validator("url")
    @classmethod
    def url_must_be_sqlite(cls, v: str) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("database.url must be a non-empty string")
        if not v.strip().startswith("sqlite"):
            # Migrations are SQLite DDL (AUTOINCREMENT)
            raise ValueError("database.url must be a SQLite URL")
        return v.strip()


class CaptchaConfig(BaseModel):
    ttl_seconds: int = Field(default=300, gt=0)
    length: int = Field(default=5, ge=4, le=12)


class AuthConfig(BaseModel):
    jwt_secret: str = Field(min_length=16)
    token_ttl_minutes: int = Field(default=360, gt=0)


class AppConfig(BaseModel):
    application: ApplicationConfig
    database: DatabaseConfig
    captcha: CaptchaConfig
    auth: AuthConfig


def _read_json_file(path: Path) -> dict:
    try:
        if path.exists():
            return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:  # pragma: no cover - defensive
        logger.error("Failed to read JSON config %s: %s", path, e)
    return {}


def load_config() -> AppConfig:
    """Load configuration with validation.

    Precedence (highest first):
    1) Environment variables
    2) Text files in `config/` (optional)
    3) storefront_config.json at project root
    4) Safe defaults for development
    """

    base = _read_json_file(ROOT_CONFIG_FILE)

    def _base(path: str, default: Optional[str] = None) -> Optional[str]:
        cur: object = base
        for key in path.split("."):
            if not isinstance(cur, dict) or key not in cur:
                return default
            cur = cur[key]
        return str(cur) if cur is not None else default

    domain = _env("APPLICATION_DOMAIN") or _read_config_file("application.domain") or _base("application.domain", "juice-sh.op")
    name = _env("APPLICATION_NAME") or _read_config_file("application.name") or _base("application.name", "OWASP Juice Shop")

    db_url = (
        _env("TEST_DATABASE_URL")
        or _env("DATABASE_URL")
        or _read_config_file("database.url")
        or _base("database.url", "sqlite+pysqlite:///:memory:")
    )

    ttl_text = _env("CAPTCHA_TTL_SECONDS") or _read_config_file("captcha.ttl_seconds") or _base("captcha.ttl_seconds", "300")
    length_text = _env("CAPTCHA_LENGTH") or _read_config_file("captcha.length") or _base("captcha.length", "5")

    jwt_secret = (
        _env("JWT_SECRET_KEY")
        or _read_config_file("auth.jwt_secret")
        or _base("auth.jwt_secret", "storefront-development-signing-key")
    )
    token_ttl_text = _env("TOKEN_TTL_MINUTES") or _read_config_file("auth.token_ttl_minutes") or _base("auth.token_ttl_minutes", "360")

    try:
        cfg = AppConfig(
            application=ApplicationConfig(name=name, domain=domain),
            database=DatabaseConfig(url=db_url),
            captcha=CaptchaConfig(
                ttl_seconds=int(str(ttl_text).strip()),
                length=int(str(length_text).strip()),
            ),
            auth=AuthConfig(
                jwt_secret=jwt_secret,
                token_ttl_minutes=int(str(token_ttl_text).strip()),
            ),
        )
        return cfg
    except (PydanticValidationError, ValueError) as e:
        logger.error("Invalid application configuration: %s", e)
        raise


_CONFIG: AppConfig | None = None


def get_config() -> AppConfig:
    """Return the process-wide configuration, loading it on first use."""
    global _CONFIG
    if _CONFIG is None:
        _CONFIG = load_config()
    return _CONFIG


def reset_config() -> None:
    """Drop the cached configuration so the next get_config() reloads it."""
    global _CONFIG
    _CONFIG = None


__all__ = [
    "AppConfig",
    "ApplicationConfig",
    "DatabaseConfig",
    "CaptchaConfig",
    "AuthConfig",
    "load_config",
    "get_config",
    "reset_config",
]
