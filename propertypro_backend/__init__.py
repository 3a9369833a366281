# propertypro_backend/__init__.py
from __future__ import annotations

import logging
import os
from typing import Any, Optional

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.middleware.proxy_fix import ProxyFix

from .cli import register_cli
from .config import DEFAULT_SECRET_KEY
from .errors import register_error_handlers
from .extensions import db, init_extensions
from . import models  # noqa: F401  (registers tables on db.metadata)


# --- Config ------------------------------------------------------------------
def _get_allowed_origins(app: Flask) -> list[str]:
    """Allowed CORS origins: local dev servers plus CORS_ALLOWED_ORIGINS."""
    default = [
        "http://localhost:5173",
        "http://localhost:5174",
        "http://127.0.0.1:5173",
        "http://127.0.0.1:5174",
    ]
    extra = app.config.get("CORS_ALLOWED_ORIGINS") or ""
    extra_list = [o.strip() for o in extra.split(",") if o.strip()]
    return sorted(set(default + extra_list))


def _configure_logging(app: Flask) -> None:
    """JSON logs to stdout."""
    level = app.config.get("LOG_LEVEL", "INFO")
    app.logger.setLevel(level)
    root = logging.getLogger()
    root.setLevel(level)

    # avoid duplicate handlers in reloaders
    if not any(isinstance(h, logging.StreamHandler) for h in root.handlers):
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            fmt='{"ts":"%(asctime)s","level":"%(levelname)s","msg":"%(message)s","name":"%(name)s"}',
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )
        handler.setFormatter(formatter)
        root.addHandler(handler)


def _configure_cors(app: Flask) -> None:
    CORS(
        app,
        resources={r"/api/*": {"origins": _get_allowed_origins(app)}},
        supports_credentials=True,
        methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
        max_age=86400,
    )


def _configure_proxy(app: Flask) -> None:
    """Respect X-Forwarded-* from the hosting proxy."""
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)  # type: ignore


def _register_blueprints(app: Flask) -> None:
    from .routes import health_bp, leases_bp, payments_bp

    prefix = app.config["API_PREFIX"]
    for bp in (health_bp, leases_bp, payments_bp):
        app.register_blueprint(bp, url_prefix=prefix)
        app.logger.debug("Registered blueprint %s at %s", bp.name, prefix)


def _load_config(app: Flask, config_object: Optional[str | Any]) -> None:
    if config_object is None:
        config_object = os.getenv("CONFIG_CLASS", "propertypro_backend.config.Config")

    if isinstance(config_object, str):
        # load "package.ClassName"
        module, _, cls = config_object.rpartition(".")
        conf = getattr(__import__(module, fromlist=[cls]), cls)
        app.config.from_object(conf)
    else:
        app.config.from_object(config_object)
    app.config.setdefault("API_PREFIX", "/api")


# --- Application Factory ------------------------------------------------------
def create_app(config_object: Optional[str | Any] = None) -> Flask:
    """
    Standard Flask application factory.

    `config_object` may be:
      - a config class or object
      - dotted path to a config class (e.g., "propertypro_backend.config.ProductionConfig")
      - None (then CONFIG_CLASS env or propertypro_backend.config.Config)
    """
    app = Flask(__name__)
    _load_config(app, config_object)

    _configure_logging(app)
    _configure_proxy(app)
    _configure_cors(app)

    if not app.testing and app.config.get("SECRET_KEY") == DEFAULT_SECRET_KEY:
        app.logger.warning("SECRET_KEY is the built-in default; set SECRET_KEY for any shared deployment.")

    init_extensions(app)
    register_error_handlers(app)
    _register_blueprints(app)
    register_cli(app)

    @app.get("/")
    def root():
        return jsonify({"service": "propertypro-backend", "message": "See /api/health"}), 200

    return app


__all__ = ["create_app", "db"]
