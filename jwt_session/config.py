from __future__ import annotations

import enum
import logging
import re
from typing import Any

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .logging import LOGGER_NAME


# RFC 6265 cookie-name token characters
_COOKIE_NAME_RE = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")


class SameSite(str, enum.Enum):
    strict = "Strict"
    lax = "Lax"
    none = "None"

    @classmethod
    def _missing_(cls, value: Any):
        # accept "lax", "STRICT", ...
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.strip().lower():
                    return member
        return None


class SessionSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="JWT_SESSION_",
        case_sensitive=False,
        frozen=True,
    )

    # Token
    timeout: int = Field(default=30, ge=0)  # minutes
    secret_key: SecretStr

    # Cookie
    cookie_name: str = "AUTH_BEARER"
    expire_on_close: bool = False
    domain: str = ""
    samesite: SameSite = SameSite.lax
    secure: bool = False
    httponly: bool = False

    # Service
    log_level: str = "info"
    metrics_enabled: bool = True

    @field_validator("secret_key")
    @classmethod
    def _check_secret(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value():
            raise ValueError("secret_key must not be empty")
        return v

    @field_validator("cookie_name")
    @classmethod
    def _check_cookie_name(cls, v: str) -> str:
        v = (v or "").strip()
        if not _COOKIE_NAME_RE.match(v):
            raise ValueError(f"invalid cookie name: {v!r}")
        return v

    @field_validator("domain", mode="before")
    @classmethod
    def _normalize_domain(cls, v):
        if v is None:
            return ""
        return str(v).strip()

    @field_validator("samesite", mode="before")
    @classmethod
    def _parse_samesite(cls, v):
        if isinstance(v, str):
            return SameSite(v)
        return v

    @model_validator(mode="after")
    def _warn_insecure_none(self) -> "SessionSettings":
        if self.samesite is SameSite.none and not self.secure:
            logging.getLogger(LOGGER_NAME).warning(
                "SameSite=None without Secure: browsers will reject the session cookie."
            )
        return self

    @property
    def timeout_seconds(self) -> int:
        return self.timeout * 60


def load_settings(**overrides: Any) -> SessionSettings:
    """Build settings from JWT_SESSION_* environment variables, with explicit overrides on top."""
    return SessionSettings(**overrides)
