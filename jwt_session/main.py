from __future__ import annotations

"""
FastAPI entrypoint (demo host):
- load settings and logging
- install the cookie session handler
- register routes, metrics and error handlers

Run with an ASGI server in factory mode, e.g. ``jwt_session.main:create_app``.
"""

import time
from typing import Optional

from fastapi import FastAPI

from .api.v1 import health_router, session_router
from .config import SessionSettings, load_settings
from .logging import setup_logging
from .monitoring import metrics as app_metrics
from .runtime import install_session_handler
from .middleware import register_exception_handlers, request_logger


def create_app(settings: Optional[SessionSettings] = None) -> FastAPI:
    settings = settings or load_settings()
    app = FastAPI(title="JWT cookie session service")
    setup_logging(settings.log_level, secret=settings.secret_key.get_secret_value())

    app.state.settings = settings
    app.state.started_at = time.time()

    install_session_handler(app, settings)

    if settings.metrics_enabled:
        app_metrics.register(app)

    app.include_router(health_router)
    app.include_router(session_router)

    # outermost, so it sees the session outcome of the inner middleware
    app.middleware("http")(request_logger)
    register_exception_handlers(app)

    return app
