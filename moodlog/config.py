"""Application configuration for Moodlog.

Values come from the process environment (optionally a ``.env`` file) and are
read once at import time.
"""

from __future__ import annotations

import os
from datetime import timedelta
from typing import Dict, Type

from dotenv import load_dotenv
from sqlalchemy.engine.url import make_url

load_dotenv()

INSECURE_SECRET = "change-me"


def _env_int(name: str, default: int) -> int:
    return int(os.environ.get(name, str(default)))


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _engine_options(uri: str) -> dict:
    backend = make_url(uri).get_backend_name()
    if backend == "sqlite":
        # SQLite locks the whole file; wait instead of failing under concurrent writers.
        return {"pool_pre_ping": True, "connect_args": {"timeout": 30}}
    if backend in ("postgresql", "postgres"):
        return {
            "pool_pre_ping": True,
            "pool_size": _env_int("DB_POOL_SIZE", 5),
            "connect_args": {"connect_timeout": _env_int("DB_CONNECT_TIMEOUT_SECONDS", 10)},
        }
    return {"pool_pre_ping": True}


class BaseConfig:
    """Settings shared by every environment."""

    SECRET_KEY = os.environ.get("SECRET_KEY", INSECURE_SECRET)

    # Persistence
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL", "sqlite:///instance/moodlog.db")
    SQLALCHEMY_ENGINE_OPTIONS = _engine_options(SQLALCHEMY_DATABASE_URI)
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Identity: bearer JWTs whose subject is the external identity reference
    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY", SECRET_KEY)
    JWT_TOKEN_LOCATION = ["headers"]
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(minutes=_env_int("JWT_ACCESS_MINUTES", 60))

    # Session cookie only carries the CSRF token
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"
    SESSION_COOKIE_SECURE = _env_flag("SESSION_COOKIE_SECURE", False)
    CSRF_ENABLED = _env_flag("CSRF_ENABLED", True)

    # Flask-Limiter reads the RATELIMIT_* keys itself
    RATELIMIT_ENABLED = _env_flag("RATELIMIT_ENABLED", True)
    RATELIMIT_DEFAULT = os.environ.get("RATELIMIT_DEFAULT", "200/hour")
    RATELIMIT_STORAGE_URI = os.environ.get("REDIS_URL", "memory://")
    QUESTION_RATE_LIMIT = os.environ.get("QUESTION_RATE_LIMIT", "20 per minute")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

    # Annotation model (Google Gemini)
    GEMINI_API_KEY = os.environ.get("GEMINI_API_KEY", "")
    GEMINI_MODEL = os.environ.get("GEMINI_MODEL", "gemini-2.0-flash")
    ANNOTATION_TIMEOUT_SECONDS = _env_int("ANNOTATION_TIMEOUT_SECONDS", 30)

    # Read side
    HISTORY_WINDOW_DAYS = _env_int("HISTORY_WINDOW_DAYS", 30)
    STREAK_TIMEZONE = os.environ.get("STREAK_TIMEZONE", "UTC")
    STREAK_DISPLAY_MAX = _env_int("STREAK_DISPLAY_MAX", 7)
    QUESTION_ENTRY_LIMIT = _env_int("QUESTION_ENTRY_LIMIT", 50)


class DevelopmentConfig(BaseConfig):
    DEBUG = True


class TestingConfig(BaseConfig):
    TESTING = True
    # A file rather than :memory: so Alembic and the app see the same schema.
    SQLALCHEMY_DATABASE_URI = os.environ.get("TEST_DATABASE_URL", "sqlite:///instance/test.db")
    SQLALCHEMY_ENGINE_OPTIONS = _engine_options(SQLALCHEMY_DATABASE_URI)
    CSRF_ENABLED = False
    RATELIMIT_ENABLED = False
    GEMINI_API_KEY = ""


class ProductionConfig(BaseConfig):
    SESSION_COOKIE_SECURE = True


config_by_name: Dict[str, Type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "ci": TestingConfig,
    "production": ProductionConfig,
}
