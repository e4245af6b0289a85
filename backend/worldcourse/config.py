"""Environment driven settings for the WorldCourse API.

A local ``.env`` file (next to the package or in the backend directory) is
loaded first; real environment variables always win.
"""

import os
from pathlib import Path

from dotenv import load_dotenv


def _load_local_env():
    pkg_dir = Path(__file__).resolve().parent
    for candidate in (pkg_dir / ".env", pkg_dir.parent / ".env"):
        if candidate.exists():
            load_dotenv(dotenv_path=candidate, override=False)


_load_local_env()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# Database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./worldcourse.db")
SQL_DEBUG = _env_bool("SQL_DEBUG", "false")
AUTO_CREATE_TABLES = _env_bool("AUTO_CREATE_TABLES", "true")

# JWT
SECRET_KEY = os.getenv("JWT_SECRET", "change-this-secret-for-prod")  # In production, always set JWT_SECRET
ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 7)))
REFRESH_TOKEN_EXPIRE_DAYS = int(os.getenv("REFRESH_TOKEN_EXPIRE_DAYS", "30"))

# Account protection
MAX_FAILED_LOGINS = int(os.getenv("MAX_FAILED_LOGINS", "5"))
ACCOUNT_LOCK_MINUTES = int(os.getenv("ACCOUNT_LOCK_MINUTES", "30"))
PASSWORD_RESET_CODE_MINUTES = int(os.getenv("PASSWORD_RESET_CODE_MINUTES", "20"))

# HTTP
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",") if o.strip()]
RATE_LIMIT_ENABLED = _env_bool("RATE_LIMIT_ENABLED", "true")
RATE_LIMIT_REQUESTS = int(os.getenv("RATE_LIMIT_REQUESTS", "20"))
RATE_LIMIT_WINDOW_SECONDS = int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "60"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

API_VERSION = "0.1.0"
