"""WSGI proxy middleware configuration helper."""

from __future__ import annotations

from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix


def init_app(app: Flask) -> None:
    """Trust ``X-Forwarded-*`` headers from ``PROXY_HOPS`` upstream proxies.

    Disabled with ``USE_PROXYFIX = False``. The rate limiter keys on the
    client address, so the hop count must match the deployment.
    """
    if not app.config.get("USE_PROXYFIX", True):
        return
    hops = int(app.config.get("PROXY_HOPS", 1))
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=hops, x_proto=hops, x_host=hops, x_prefix=hops)
