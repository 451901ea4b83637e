"""CORS configuration helper for API resources."""

from __future__ import annotations

from flask import Flask
from flask_cors import CORS

# Headers the optimistic-concurrency endpoints rely on
EXPOSED_HEADERS = ["ETag", "X-Request-ID"]
ALLOWED_HEADERS = ["Authorization", "Content-Type", "If-Match", "X-Request-ID"]


def init_app(app: Flask) -> None:
    """Configure CORS for API endpoints based on application config.

    ``CORS_ORIGINS`` is a comma-separated list; blank or ``"*"`` allows any
    origin but disables credential support. ``ETag`` is exposed to browsers so
    clients can echo it back in ``If-Match``.
    """
    origins = [o.strip() for o in app.config.get("CORS_ORIGINS", "").split(",") if o.strip()]
    wildcard = not origins or origins == ["*"]

    CORS(
        app,
        resources={r"/api/*": {"origins": "*" if wildcard else origins}},
        supports_credentials=not wildcard,
        expose_headers=EXPOSED_HEADERS,
        allow_headers=ALLOWED_HEADERS,
        max_age=app.config.get("CORS_MAX_AGE", 600),
    )
