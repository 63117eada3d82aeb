from __future__ import annotations

import logging
import re
from typing import Iterable, Optional


LOGGER_NAME = "jwt-session"

# compact JWS: header.claims.signature, header always starts with '{"' -> "eyJ"
_TOKEN_RE = re.compile(r"eyJ[A-Za-z0-9_-]*\.[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+")
REDACTED = "[redacted]"


class SessionSecretFilter(logging.Filter):
    """Masks session tokens and the signing key in log messages."""

    def __init__(self, secrets: Iterable[str] = ()) -> None:
        super().__init__()
        self._secrets = [s for s in secrets if s]

    def redact(self, text: str) -> str:
        text = _TOKEN_RE.sub(REDACTED, text)
        for secret in self._secrets:
            text = text.replace(secret, REDACTED)
        return text

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = self.redact(message)
        if redacted != message:
            record.msg = redacted
            record.args = ()
        return True


def setup_logging(level: str | int = "INFO", secret: Optional[str] = None) -> logging.Logger:
    lvl = level
    if isinstance(level, str):
        lvl = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=lvl, format="%(asctime)s %(levelname)s %(name)s - %(message)s"
    )
    logger = logging.getLogger(LOGGER_NAME)
    # one filter per logger; a new app replaces the previous one's secret
    for old in [f for f in logger.filters if isinstance(f, SessionSecretFilter)]:
        logger.removeFilter(old)
    logger.addFilter(SessionSecretFilter([secret] if secret else []))
    return logger
