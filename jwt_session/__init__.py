"""Stateless cookie sessions: the session data lives in a signed JWT held by the client."""

from .config import SameSite, SessionSettings, load_settings
from .context import RequestContext, ResponseContext
from .errors import (
    JWTSessionError,
    SessionAlreadyStartedError,
    SessionNotStartedError,
    VerificationFailure,
)
from .handler import JWTSessionHandler, SessionHandler
from .runtime import JWTSessionMiddleware, Session, get_session, install_session_handler

__all__ = [
    "SameSite",
    "SessionSettings",
    "load_settings",
    "RequestContext",
    "ResponseContext",
    "JWTSessionError",
    "SessionAlreadyStartedError",
    "SessionNotStartedError",
    "VerificationFailure",
    "JWTSessionHandler",
    "SessionHandler",
    "JWTSessionMiddleware",
    "Session",
    "get_session",
    "install_session_handler",
]
