from __future__ import annotations

"""
Explicit request/response cookie contexts passed to the session handler.
Starlette objects are only touched in from_request() and apply().
"""

from typing import Dict, Mapping, Optional, Tuple

from starlette.requests import Request
from starlette.responses import Response

from .schemas import CookieAttributes


class RequestContext:
    def __init__(self, cookies: Optional[Mapping[str, str]] = None) -> None:
        self._cookies: Dict[str, str] = dict(cookies or {})

    @classmethod
    def from_request(cls, request: Request) -> "RequestContext":
        return cls(request.cookies)

    def get_cookie(self, name: str) -> Optional[str]:
        return self._cookies.get(name)


class ResponseContext:
    """Collects cookies to emit; emission fails once headers are sent."""

    def __init__(self, headers_sent: bool = False) -> None:
        self.headers_sent = headers_sent
        self._cookies: Dict[str, Tuple[str, CookieAttributes]] = {}

    def set_cookie(self, name: str, value: str, attributes: CookieAttributes) -> bool:
        if self.headers_sent:
            return False
        # last write for a name wins
        self._cookies[name] = (value, attributes)
        return True

    @property
    def cookies(self) -> Dict[str, Tuple[str, CookieAttributes]]:
        return dict(self._cookies)

    def apply(self, response: Response) -> Response:
        for name, (value, attrs) in self._cookies.items():
            response.set_cookie(
                name,
                value,
                expires=attrs.expires,
                path=attrs.path,
                domain=attrs.domain or None,
                secure=attrs.secure,
                httponly=attrs.httponly,
                samesite=attrs.samesite.value.lower(),
            )
        self.headers_sent = True
        return response
