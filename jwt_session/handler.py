from __future__ import annotations

"""
Session handler backed by a signed cookie instead of a server-side store.

The host runtime calls the six operations of SessionHandler; this module
decides what goes into the token and the cookie.
"""

import logging
from typing import Protocol, runtime_checkable

from .config import SessionSettings
from .context import RequestContext, ResponseContext
from .logging import LOGGER_NAME
from .monitoring import metrics
from .security import cookies, tokens


logger = logging.getLogger(LOGGER_NAME)


@runtime_checkable
class SessionHandler(Protocol):
    def initialize(self, path: str, name: str) -> bool: ...

    def finalize(self) -> bool: ...

    def load(self, session_id: str, request: RequestContext) -> str: ...

    def persist(self, session_id: str, data: str, response: ResponseContext) -> bool: ...

    def invalidate(self, session_id: str, response: ResponseContext) -> bool: ...

    def reclaim(self, max_age: int) -> int: ...


class JWTSessionHandler:
    def __init__(self, settings: SessionSettings) -> None:
        self.settings = settings

    def initialize(self, path: str, name: str) -> bool:
        return True

    def finalize(self) -> bool:
        return True

    def load(self, session_id: str, request: RequestContext) -> str:
        token = request.get_cookie(self.settings.cookie_name)
        if not token:
            metrics.session_loaded("absent")
            return ""
        # failures stay silent here: no log line, no reason
        decoded = tokens.decode(token, self.settings)
        metrics.session_loaded("valid" if decoded.valid else "invalid")
        return decoded.data if decoded.valid else ""

    def persist(self, session_id: str, data: str, response: ResponseContext) -> bool:
        token = tokens.encode(data, session_id, self.settings)
        attrs = cookies.compute_attributes(self.settings, self.settings.expire_on_close)
        ok = response.set_cookie(self.settings.cookie_name, token, attrs)
        metrics.session_written("persist", ok)
        if ok:
            logger.debug(
                "session cookie %s written (expire_on_close=%s)",
                self.settings.cookie_name,
                self.settings.expire_on_close,
            )
        else:
            logger.warning("session cookie %s not written: headers already sent", self.settings.cookie_name)
        return ok

    def invalidate(self, session_id: str, response: ResponseContext) -> bool:
        attrs = cookies.compute_clear_attributes(self.settings)
        ok = response.set_cookie(self.settings.cookie_name, attrs.value, attrs)
        metrics.session_written("invalidate", ok)
        if ok:
            logger.debug("session cookie %s cleared", self.settings.cookie_name)
        else:
            logger.warning("session cookie %s not cleared: headers already sent", self.settings.cookie_name)
        return ok

    def reclaim(self, max_age: int) -> int:
        # nothing stored server-side
        return 0
