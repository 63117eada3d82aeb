from __future__ import annotations


class JWTSessionError(Exception):
    """Base class for errors raised by this package."""


class VerificationFailure(JWTSessionError):
    """A session token could not be trusted.

    Raised only inside the token codec; callers outside it see an empty session.
    """


class SessionAlreadyStartedError(JWTSessionError):
    """A session (or the session handler) was initialized twice."""


class SessionNotStartedError(JWTSessionError):
    """The session was used before ``start()``."""
