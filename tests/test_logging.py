from __future__ import annotations

import logging

from jwt_session.logging import LOGGER_NAME, REDACTED, SessionSecretFilter, setup_logging
from jwt_session.security import tokens


def test_filter_masks_tokens_and_secret(settings):
    token = tokens.encode("user=42", "sid", settings)
    f = SessionSecretFilter(["s3cret"])
    record = logging.LogRecord(LOGGER_NAME, logging.INFO, __file__, 1, "cookie %s key %s", (token, "s3cret"), None)
    assert f.filter(record) is True
    assert record.getMessage() == f"cookie {REDACTED} key {REDACTED}"


def test_filter_leaves_plain_messages_alone():
    f = SessionSecretFilter()
    record = logging.LogRecord(LOGGER_NAME, logging.INFO, __file__, 1, "GET %s -> %d", ("/session", 200), None)
    f.filter(record)
    assert record.args == ("/session", 200)
    assert record.getMessage() == "GET /session -> 200"


def test_setup_logging_installs_single_filter(caplog):
    setup_logging("debug", secret="first-secret")
    logger = setup_logging("debug", secret="second-secret")
    filters = [f for f in logger.filters if isinstance(f, SessionSecretFilter)]
    assert len(filters) == 1

    caplog.set_level("INFO", logger=LOGGER_NAME)
    logger.info("using second-secret")
    assert "second-secret" not in caplog.text
    assert REDACTED in caplog.text
