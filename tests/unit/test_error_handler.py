"""Unit tests for the CORS headers attached to unhandled-error responses."""

import pytest
from libs.common.config import Settings
from libs.common.error_handler import cors_error_headers
from starlette.requests import Request


def _request(origin=None) -> Request:
    headers = [(b"origin", origin.encode())] if origin else []
    return Request({"type": "http", "method": "POST", "path": "/store/orders", "headers": headers})


@pytest.fixture
def cors_origins(monkeypatch):
    def _set(origins):
        settings = Settings(_env_file=None, CORS_ORIGINS=origins)
        monkeypatch.setattr("libs.common.error_handler.get_settings", lambda: settings)

    return _set


def test_wildcard_origin(cors_origins):
    cors_origins(["*"])
    assert cors_error_headers(_request("https://store.acadeemia.com")) == {
        "Access-Control-Allow-Origin": "*"
    }


def test_listed_origin_is_echoed(cors_origins):
    cors_origins(["https://store.acadeemia.com"])
    headers = cors_error_headers(_request("https://store.acadeemia.com"))
    assert headers["Access-Control-Allow-Origin"] == "https://store.acadeemia.com"
    assert headers["Vary"] == "Origin"


def test_unlisted_origin_gets_nothing(cors_origins):
    cors_origins(["https://store.acadeemia.com"])
    assert cors_error_headers(_request("https://evil.example")) == {}


def test_same_origin_request_gets_nothing(cors_origins):
    cors_origins(["*"])
    assert cors_error_headers(_request()) == {}
