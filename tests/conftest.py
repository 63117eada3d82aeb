from __future__ import annotations

import pytest

from jwt_session.config import SessionSettings


SECRET = "s3cret"


@pytest.fixture()
def settings() -> SessionSettings:
    return SessionSettings(secret_key=SECRET, timeout=60, domain="example.com")


@pytest.fixture()
def make_settings():
    def _make(**overrides) -> SessionSettings:
        values = {"secret_key": SECRET, "timeout": 60, "domain": "example.com"}
        values.update(overrides)
        return SessionSettings(**values)

    return _make


@pytest.fixture()
def app_instance(make_settings):
    from jwt_session.main import create_app

    # host-only cookies: the test client talks to "testserver"
    return create_app(make_settings(domain="", metrics_enabled=True))
