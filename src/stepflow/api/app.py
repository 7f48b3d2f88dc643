"""Flask app factory for the HTTP API."""

from __future__ import annotations

from typing import Optional

from flask import Flask
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from ..config.settings import Settings, get_settings
from ..pages import PageStore
from ..utils.logging import configure_logging
from .routes import register_routes


def create_app(settings: Optional[Settings] = None) -> Flask:
    settings = settings or get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.json_logs)

    app = Flask(__name__)
    CORS(app, supports_credentials=True, origins=settings.cors_origin_list())
    Limiter(
        key_func=get_remote_address,
        app=app,
        default_limits=[settings.rate_limit],
        storage_uri="memory://",
    )
    register_routes(app, settings=settings, page_store=PageStore(settings))
    return app
