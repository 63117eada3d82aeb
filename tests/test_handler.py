from __future__ import annotations

import time

import jwt
import pytest

from jwt_session.context import RequestContext, ResponseContext
from jwt_session.handler import JWTSessionHandler, SessionHandler
from jwt_session.security import tokens


@pytest.fixture()
def handler(settings):
    return JWTSessionHandler(settings)


def _written_token(response: ResponseContext, name: str = "AUTH_BEARER") -> str:
    value, _ = response.cookies[name]
    return value


def test_satisfies_protocol(handler):
    assert isinstance(handler, SessionHandler)


def test_open_close_and_gc_are_noops(handler):
    assert handler.initialize("/tmp", "PHPSESSID") is True
    assert handler.finalize() is True
    assert handler.reclaim(1440) == 0


def test_load_without_cookie_is_empty(handler):
    assert handler.load("sid", RequestContext()) == ""


@pytest.mark.parametrize("cookies", [{}, {"AUTH_BEARER": ""}])
def test_load_empty_cookie_skips_decode(handler, monkeypatch, cookies):
    def _boom(*args, **kwargs):
        raise AssertionError("decode must not be called")

    monkeypatch.setattr(tokens, "decode", _boom)
    assert handler.load("sid", RequestContext(cookies)) == ""


def test_persist_then_load(handler):
    response = ResponseContext()
    assert handler.persist("sid-9", "user=42", response) is True
    token = _written_token(response)

    claims = jwt.decode(token, options={"verify_signature": False})
    assert claims["exp"] - claims["iat"] == 3600
    assert claims["jti"] == "sid-9"

    assert handler.load("sid-9", RequestContext({"AUTH_BEARER": token})) == "user=42"


def test_persist_uses_long_lived_cookie(handler):
    response = ResponseContext()
    handler.persist("sid", "x", response)
    _, attrs = response.cookies["AUTH_BEARER"]
    assert attrs.expires is not None
    assert attrs.expires.timestamp() > time.time() + 700 * 24 * 3600


def test_expire_on_close_write(make_settings):
    handler = JWTSessionHandler(make_settings(expire_on_close=True))
    response = ResponseContext()
    handler.persist("sid", "user=42", response)
    token, attrs = response.cookies["AUTH_BEARER"]
    assert attrs.expires is None
    claims = jwt.decode(token, options={"verify_signature": False})
    assert claims["exp"] - claims["iat"] == 3600


def test_load_rejects_tampered_cookie(handler, make_settings):
    response = ResponseContext()
    handler.persist("sid", "user=42", response)
    header, payload, _ = _written_token(response).split(".")
    foreign = tokens.encode("user=42", "sid", make_settings(secret_key="other")).split(".")[2]
    forged = f"{header}.{payload}.{foreign}"
    assert handler.load("sid", RequestContext({"AUTH_BEARER": forged})) == ""


def test_load_rejects_expired_cookie(handler, settings):
    token = tokens.encode("user=42", "sid", settings, now=int(time.time()) - 3601)
    assert handler.load("sid", RequestContext({"AUTH_BEARER": token})) == ""


def test_load_reads_configured_cookie_name(make_settings, settings):
    handler = JWTSessionHandler(make_settings(cookie_name="sess"))
    token = tokens.encode("user=42", "sid", settings)
    assert handler.load("sid", RequestContext({"AUTH_BEARER": token})) == ""
    assert handler.load("sid", RequestContext({"sess": token})) == "user=42"


def test_invalidate_clears_cookie(handler):
    response = ResponseContext()
    before = time.time()
    assert handler.invalidate("ignored", response) is True
    value, attrs = response.cookies["AUTH_BEARER"]
    assert value == ""
    assert attrs.expires.timestamp() < before


def test_emission_fails_after_headers_sent(handler):
    response = ResponseContext(headers_sent=True)
    assert handler.persist("sid", "x", response) is False
    assert handler.invalidate("sid", response) is False
    assert response.cookies == {}


def test_last_write_wins(handler):
    response = ResponseContext()
    handler.persist("sid", "first", response)
    handler.persist("sid", "second", response)
    token = _written_token(response)
    assert handler.load("sid", RequestContext({"AUTH_BEARER": token})) == "second"


def test_secret_never_logged(handler, caplog):
    caplog.set_level("DEBUG", logger="jwt-session")
    response = ResponseContext()
    handler.persist("sid", "user=42", response)
    handler.load("sid", RequestContext({"AUTH_BEARER": "bogus"}))
    token = _written_token(response)
    assert "s3cret" not in caplog.text
    assert token not in caplog.text
