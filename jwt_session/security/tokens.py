from __future__ import annotations

"""
Session token codec:
- encode: opaque session data -> signed JWT (HS512 only)
- decode: signed JWT -> (data, valid); every verification problem collapses to an empty, invalid result
"""

import time
from typing import Optional

import jwt
from pydantic import ValidationError

from ..config import SessionSettings
from ..errors import VerificationFailure
from ..schemas import DecodedSession, SessionClaims


# Fixed; never read from the token header or from configuration.
ALGORITHM = "HS512"

_REQUIRED_CLAIMS = ["iat", "nbf", "exp", "data"]


def build_claims(
    data: str,
    token_id: str,
    settings: SessionSettings,
    now: Optional[int] = None,
) -> SessionClaims:
    issued_at = int(time.time()) if now is None else int(now)
    return SessionClaims(
        iat=issued_at,
        nbf=issued_at,
        exp=issued_at + settings.timeout_seconds,
        jti=token_id,
        iss=settings.domain,
        data=data,
    )


def encode(
    data: str,
    token_id: str,
    settings: SessionSettings,
    now: Optional[int] = None,
) -> str:
    claims = build_claims(data, token_id, settings, now=now)
    return jwt.encode(
        claims.model_dump(),
        settings.secret_key.get_secret_value(),
        algorithm=ALGORITHM,
    )


def verify(token: str, settings: SessionSettings, now: Optional[float] = None) -> SessionClaims:
    """
    Check signature and algorithm, parse the claims, then check ``iat``/``nbf`` <= now < ``exp``.

    PyJWT only handles the signature here; the time window is checked against
    ``now`` (defaults to the current time) so callers can evaluate a token at a given instant.

    Raises:
        VerificationFailure: for any reason the token cannot be trusted
    """
    try:
        payload = jwt.decode(
            token,
            settings.secret_key.get_secret_value(),
            algorithms=[ALGORITHM],
            options={
                "require": _REQUIRED_CLAIMS,
                "verify_exp": False,
                "verify_nbf": False,
                "verify_iat": False,
            },
        )
        claims = SessionClaims.model_validate(payload)
    except (jwt.PyJWTError, ValidationError) as exc:
        raise VerificationFailure("session token rejected") from exc

    current = time.time() if now is None else now
    if current < claims.nbf or current < claims.iat:
        raise VerificationFailure("session token not yet valid")
    if current >= claims.exp:
        raise VerificationFailure("session token expired")
    return claims


def decode(
    token: Optional[str],
    settings: SessionSettings,
    now: Optional[float] = None,
) -> DecodedSession:
    if not token or not isinstance(token, str):
        return DecodedSession("", False)
    try:
        claims = verify(token, settings, now=now)
    except VerificationFailure:
        return DecodedSession("", False)
    return DecodedSession(claims.data, True)
