from __future__ import annotations

"""
HTTP plumbing around the session handler:
- request_logger: one line per request, including what happened to the session cookie
- error handlers: JSON {"code", "msg"} bodies; session errors mapped without leaking token details
"""

import logging
import time
from typing import Callable, Tuple

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .errors import (
    JWTSessionError,
    SessionAlreadyStartedError,
    SessionNotStartedError,
    VerificationFailure,
)
from .logging import LOGGER_NAME


logger = logging.getLogger(LOGGER_NAME)


def _session_outcome(request: Request) -> str:
    session = getattr(request.state, "session", None)
    if session is None:
        return "none"
    if session.destroyed:
        return "cleared"
    if session.response.cookies:
        return "written"
    return "unchanged"


async def request_logger(request: Request, call_next: Callable):
    start = time.time()
    response = None
    try:
        response = await call_next(request)
        return response
    finally:
        dur = (time.time() - start) * 1000
        status_code = getattr(response, "status_code", 0) if response is not None else 500

        if status_code >= 500:
            log_level = logging.ERROR
        elif status_code >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        # Cookie / Set-Cookie carry the token: only the outcome is logged
        logger.log(
            log_level,
            f"{request.method} {request.url.path} -> {status_code} {dur:.1f}ms session={_session_outcome(request)}"
        )


def _describe(exc: JWTSessionError) -> Tuple[int, str]:
    if isinstance(exc, VerificationFailure):
        return 401, "invalid session"
    if isinstance(exc, SessionNotStartedError):
        return 500, "session handler not installed"
    if isinstance(exc, SessionAlreadyStartedError):
        return 500, "session already started"
    return 500, "session error"


def _caused_by_verification(exc: BaseException) -> bool:
    seen = set()
    cur = exc
    while cur is not None and id(cur) not in seen:
        if isinstance(cur, VerificationFailure):
            return True
        seen.add(id(cur))
        cur = cur.__cause__ or cur.__context__
    return False


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"code": exc.status_code, "msg": exc.detail},
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=422, content={"code": 422, "msg": str(exc)})


async def session_exception_handler(request: Request, exc: JWTSessionError):
    status_code, msg = _describe(exc)
    # a rejected token is indistinguishable from no session: nothing is logged
    if not isinstance(exc, VerificationFailure):
        logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc)
    return JSONResponse(status_code=status_code, content={"code": status_code, "msg": msg})


async def unhandled_exception_handler(request: Request, exc: Exception):
    if _caused_by_verification(exc):
        return JSONResponse(status_code=401, content={"code": 401, "msg": "invalid session"})
    logger.exception("Unhandled error")
    return JSONResponse(status_code=500, content={"code": 500, "msg": "internal error"})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(JWTSessionError, session_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
