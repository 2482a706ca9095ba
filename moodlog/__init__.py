"""Moodlog application factory."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from moodlog.config import INSECURE_SECRET, config_by_name
from moodlog.core.auth.csrf import generate_csrf_token
from moodlog.domains.journal.ml.annotation_client import AnnotationClient
from moodlog.extensions import init_extensions

PROJECT_ROOT = Path(__file__).resolve().parent.parent

logger = logging.getLogger(__name__)


def create_app(config_name: Optional[str] = None) -> Flask:
    """Build an app for ``config_name`` (falls back to $APP_ENV, then development)."""
    env_name = (config_name or os.environ.get("APP_ENV") or "development").lower()
    if env_name not in config_by_name:
        raise ValueError(f"Unknown config {env_name!r}; expected one of {sorted(config_by_name)}")

    app = Flask(__name__, instance_path=str(PROJECT_ROOT / "instance"))
    app.config.from_object(config_by_name[env_name])
    if env_name == "production" and app.config["SECRET_KEY"] == INSECURE_SECRET:
        raise RuntimeError("SECRET_KEY must be set in production")

    _resolve_sqlite_path(app)
    logging.getLogger("moodlog").setLevel(app.config["LOG_LEVEL"])

    # Mapped classes must be imported before the first query configures mappers.
    from moodlog.core.users import models as _user_models  # noqa: F401
    from moodlog.domains.journal import models as _journal_models  # noqa: F401

    init_extensions(app)
    app.extensions["annotation_client"] = AnnotationClient.from_config(app.config)
    if not app.config["GEMINI_API_KEY"] and not app.testing:
        logger.warning("GEMINI_API_KEY is not set; entries will be saved without annotation")

    _register_routes(app)
    _register_error_handlers(app)

    from moodlog.scripts.maintenance import register_commands

    register_commands(app)
    return app


def _resolve_sqlite_path(app: Flask) -> None:
    """Anchor relative sqlite paths at the project root and create the parent dir."""
    uri = app.config["SQLALCHEMY_DATABASE_URI"]
    prefix = "sqlite:///"
    if not uri.startswith(prefix) or uri == prefix + ":memory:":
        return
    path = Path(uri[len(prefix):])
    if not path.is_absolute():
        path = PROJECT_ROOT / path
        app.config["SQLALCHEMY_DATABASE_URI"] = f"{prefix}{path}"
    path.parent.mkdir(parents=True, exist_ok=True)


def _register_routes(app: Flask) -> None:
    from moodlog.domains.journal.controllers.journal_api import journal_api_bp

    app.register_blueprint(journal_api_bp, url_prefix="/api/journal")

    @app.get("/health")
    def health():
        return jsonify({"ok": True})

    @app.get("/api/csrf")
    def csrf_token():
        return jsonify({"ok": True, "csrf_token": generate_csrf_token()})


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        code = (exc.name or "error").lower().replace(" ", "_")
        return jsonify({"ok": False, "error": code}), exc.code

    @app.errorhandler(Exception)
    def _unexpected_error(exc: Exception):
        app.logger.exception("Unhandled error: %s", exc)
        message = str(exc) if (app.debug or app.testing) else "unexpected_error"
        return jsonify({"ok": False, "error": message}), 500
