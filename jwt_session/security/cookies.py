from __future__ import annotations

import time
from datetime import datetime, timedelta, timezone
from typing import Optional

from ..config import SessionSettings
from ..schemas import CookieAttributes


COOKIE_PATH = "/"
COOKIE_LIFETIME_YEARS = 2
CLEAR_OFFSET = timedelta(hours=1)


def _utc(now: Optional[float]) -> datetime:
    ts = time.time() if now is None else now
    # cookie expiry has second precision
    return datetime.fromtimestamp(int(ts), tz=timezone.utc)


def _add_years(dt: datetime, years: int) -> datetime:
    try:
        return dt.replace(year=dt.year + years)
    except ValueError:
        # Feb 29 -> Mar 1
        return dt.replace(year=dt.year + years, month=3, day=1)


def compute_attributes(
    settings: SessionSettings,
    expire_on_close: bool,
    now: Optional[float] = None,
) -> CookieAttributes:
    """
    Attributes for a normal session write.

    The cookie outlives the token on purpose: the token's own ``exp`` bounds the session,
    so an expired cookie still reaches the server and decodes as invalid.
    """
    expires = None if expire_on_close else _add_years(_utc(now), COOKIE_LIFETIME_YEARS)
    return CookieAttributes(
        expires=expires,
        domain=settings.domain,
        samesite=settings.samesite,
        secure=settings.secure,
        httponly=settings.httponly,
        path=COOKIE_PATH,
    )


def compute_clear_attributes(settings: SessionSettings, now: Optional[float] = None) -> CookieAttributes:
    """Attributes for logout: empty value, expiry in the past."""
    return CookieAttributes(
        expires=_utc(now) - CLEAR_OFFSET,
        domain=settings.domain,
        samesite=settings.samesite,
        secure=settings.secure,
        httponly=settings.httponly,
        path=COOKIE_PATH,
        value="",
    )
