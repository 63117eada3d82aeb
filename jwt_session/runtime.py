from __future__ import annotations

"""
Host-side session lifecycle for ASGI apps:
- Session: per-request state, JSON-serialized into the handler's opaque data string
- JWTSessionMiddleware: start/close a Session around every request
- install_session_handler: register the handler on an app exactly once
"""

import json
import logging
import secrets
from typing import Any, Dict, Iterator, MutableMapping, Optional

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from .config import SessionSettings
from .context import RequestContext, ResponseContext
from .errors import SessionAlreadyStartedError, SessionNotStartedError
from .handler import JWTSessionHandler, SessionHandler
from .logging import LOGGER_NAME


logger = logging.getLogger(LOGGER_NAME)


def _deserialize(raw: str) -> Dict[str, Any]:
    if not raw:
        return {}
    try:
        value = json.loads(raw)
    except ValueError:
        return {}
    return value if isinstance(value, dict) else {}


def _serialize(data: Dict[str, Any]) -> str:
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False, sort_keys=True)


class Session(MutableMapping[str, Any]):
    """
    One request's view of the session.

    ``close()`` re-issues the cookie whenever the session holds data, so every
    request that carries a session slides its expiry forward.
    """

    def __init__(
        self,
        handler: SessionHandler,
        request: RequestContext,
        response: Optional[ResponseContext] = None,
        *,
        name: str = "session",
        session_id: Optional[str] = None,
    ) -> None:
        self.handler = handler
        self.request = request
        self.response = response if response is not None else ResponseContext()
        self.name = name
        self.id = session_id
        self.modified = False
        self.destroyed = False
        self._started = False
        self._data: Dict[str, Any] = {}

    @property
    def started(self) -> bool:
        return self._started

    def start(self) -> "Session":
        if self._started:
            raise SessionAlreadyStartedError("Session already started!")
        self.handler.initialize("", self.name)
        if not self.id:
            self.id = secrets.token_urlsafe(24)
        self._data = _deserialize(self.handler.load(self.id, self.request))
        self._started = True
        return self

    def _require_started(self) -> None:
        if not self._started:
            raise SessionNotStartedError("Session not started")

    def __getitem__(self, key: str) -> Any:
        self._require_started()
        return self._data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._require_started()
        self._data[key] = value
        self.modified = True

    def __delitem__(self, key: str) -> None:
        self._require_started()
        del self._data[key]
        self.modified = True

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._data)

    def destroy(self) -> None:
        self._require_started()
        self._data.clear()
        self.destroyed = True
        self.modified = True

    def close(self) -> bool:
        self._require_started()
        ok = True
        if self.destroyed:
            ok = self.handler.invalidate(self.id or "", self.response)
        elif self.modified or self._data:
            ok = self.handler.persist(self.id or "", _serialize(self._data), self.response)
        self.handler.finalize()
        self._started = False
        return ok


class JWTSessionMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, handler: SessionHandler, name: str = "session") -> None:
        super().__init__(app)
        self.handler = handler
        self.name = name

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        session = Session(self.handler, RequestContext.from_request(request), name=self.name)
        session.start()
        request.state.session = session
        response = await call_next(request)
        if not session.close():
            logger.warning("session for %s %s was not saved", request.method, request.url.path)
        session.response.apply(response)
        return response


def install_session_handler(
    app: FastAPI,
    settings: Optional[SessionSettings] = None,
    handler: Optional[SessionHandler] = None,
) -> SessionHandler:
    """Register the cookie session handler on ``app``; a second call raises."""
    if getattr(app.state, "session_handler", None) is not None:
        raise SessionAlreadyStartedError("Session handler already installed!")
    if handler is None:
        if settings is None:
            raise ValueError("settings or handler required")
        handler = JWTSessionHandler(settings)
    name = settings.cookie_name if settings is not None else "session"
    app.add_middleware(JWTSessionMiddleware, handler=handler, name=name)
    app.state.session_handler = handler
    return handler


def get_session(request: Request) -> Session:
    """FastAPI dependency returning the current request's session."""
    session = getattr(request.state, "session", None)
    if session is None:
        raise SessionNotStartedError("No session on this request; is the session handler installed?")
    return session
