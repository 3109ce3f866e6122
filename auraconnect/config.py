import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from auraconnect.errors import ConfigError

# Load a local .env file if present (no-op otherwise).
load_dotenv()


def _env_bool(name: str, default: Optional[bool] = None) -> Optional[bool]:
    """Parse a boolean environment variable.

    Returns:
      - True/False if the env var is set to a recognizable value
      - default if unset or unrecognized

    Accepted truthy: 1, true, yes, y, on
    Accepted falsy:  0, false, no, n, off
    """

    raw = os.environ.get(name)
    if raw is None:
        return default
    v = raw.strip().lower()
    if v in ("1", "true", "yes", "y", "on"):
        return True
    if v in ("0", "false", "no", "n", "off"):
        return False
    return default


@dataclass(frozen=True)
class Config:
    """Runtime configuration.

    IMPORTANT: Provide the signing secret via environment variables or a .env file.
    There is no built-in default; `load_config()` refuses to run without one.
    """

    # -----------------
    # Core
    # -----------------
    DB_DSN: str = (
        os.environ.get("AURA_DB_PATH")
        or os.environ.get("DATABASE_URL")
        or "./auraconnect.db"
    )

    API_HOST: str = os.environ.get("API_HOST", "0.0.0.0")
    PORT: int = int(os.environ.get("PORT") or os.environ.get("API_PORT") or "3000")

    # -----------------
    # Auth (JWT)
    # -----------------
    AUTH_JWT_SECRET: str | None = os.environ.get("AUTH_JWT_SECRET") or os.environ.get("JWT_SECRET")
    AUTH_TOKEN_TTL_HOURS: int = int(os.environ.get("AUTH_TOKEN_TTL_HOURS", "24"))

    # pbkdf2_sha256 iterations. Lower only for tests.
    AUTH_PASSWORD_ROUNDS: int = int(os.environ.get("AUTH_PASSWORD_ROUNDS", "29000"))

    # Session cookie (httpOnly, SameSite=lax). Secure is off by default for local http.
    AUTH_COOKIE_NAME: str = os.environ.get("AUTH_COOKIE_NAME", "token")
    AUTH_COOKIE_PATH: str = os.environ.get("AUTH_COOKIE_PATH", "/")
    AUTH_COOKIE_SAMESITE: str = os.environ.get("AUTH_COOKIE_SAMESITE", "lax")
    AUTH_COOKIE_SECURE: bool = _env_bool("AUTH_COOKIE_SECURE", False) is True

    # -----------------
    # CORS (development)
    # -----------------
    # Empty means no CORS middleware (pages are served from the same origin).
    CORS_ALLOW_ORIGINS: str = os.environ.get("CORS_ALLOW_ORIGINS", "")

    # -----------------
    # Seed data (scripts/init_db.py)
    # -----------------
    DEMO_USER_NAME: str = os.environ.get("DEMO_USER_NAME", "Demo User")
    DEMO_USER_EMAIL: str = os.environ.get("DEMO_USER_EMAIL", "demo@auraconnect.app")
    DEMO_USER_PASSWORD: str = os.environ.get("DEMO_USER_PASSWORD", "Demo@1234")


def require_secret(cfg: Config) -> str:
    secret = (cfg.AUTH_JWT_SECRET or "").strip()
    if not secret:
        raise ConfigError("Missing AUTH_JWT_SECRET (or JWT_SECRET) in environment. Add it to .env")
    return secret


def load_config() -> Config:
    cfg = Config()
    require_secret(cfg)
    return cfg
