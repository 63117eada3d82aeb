from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, model_validator

from .config import SameSite


class SessionClaims(BaseModel):
    """Payload of a session token (registered JWT claim names)."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    iat: StrictInt  # issued at
    nbf: StrictInt  # not before, == iat
    exp: StrictInt  # expires at, == iat + timeout * 60
    jti: StrictStr = ""  # host session id, never used for lookup
    iss: StrictStr = ""  # configured domain
    data: StrictStr  # opaque session payload

    @model_validator(mode="after")
    def _check_window(self) -> "SessionClaims":
        if not (self.nbf <= self.exp):
            raise ValueError("nbf must not be after exp")
        return self


class DecodedSession(NamedTuple):
    data: str
    valid: bool


@dataclass(frozen=True)
class CookieAttributes:
    """Attributes of an emitted session cookie.

    ``expires`` is an absolute UTC instant, or ``None`` for a session-only cookie.
    """

    expires: Optional[datetime]
    domain: str
    samesite: SameSite
    secure: bool
    httponly: bool = False
    path: str = "/"
    value: str = ""


class SessionResponse(BaseModel):
    data: Dict[str, Any] = Field(default_factory=dict)


class HealthResponse(BaseModel):
    status: str
    uptime_seconds: float
    cookie_name: str
    timeout_minutes: int
    expire_on_close: bool
