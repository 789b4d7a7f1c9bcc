"""Tests for limiter/cache key helpers."""

import pytest
from starlette.requests import Request

from prepgate.utils.keys import build_key, client_identifier, hash_key


def _request(headers: dict[str, str] | None = None, client: tuple[str, int] | None = ("10.0.0.9", 5000)) -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/",
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
        "client": client,
    }
    return Request(scope)


class TestBuildKey:
    def test_joins_parts_with_colons(self):
        assert build_key("external", "github", "1.2.3.4") == "external:github:1.2.3.4"

    def test_escapes_separator_inside_parts(self):
        assert build_key("login", "::1") == "login:%3A%3A1"
        # distinct inputs must never collide
        assert build_key("a:b", "c") != build_key("a", "b:c")

    def test_escapes_percent_before_separator(self):
        assert build_key("x", "%3A") != build_key("x", ":")

    def test_strips_whitespace(self):
        assert build_key(" login ", " 1.2.3.4") == "login:1.2.3.4"

    @pytest.mark.parametrize("parts", [(), ("login", ""), ("login", "   ")])
    def test_rejects_empty_parts(self, parts):
        with pytest.raises(ValueError):
            build_key(*parts)


class TestClientIdentifier:
    def test_prefers_first_forwarded_hop(self):
        request = _request({"X-Forwarded-For": "203.0.113.7, 10.0.0.1", "X-Real-IP": "198.51.100.2"})
        assert client_identifier(request) == "203.0.113.7"

    def test_falls_back_to_real_ip(self):
        request = _request({"X-Real-IP": "198.51.100.2"})
        assert client_identifier(request) == "198.51.100.2"

    def test_falls_back_to_socket_peer(self):
        assert client_identifier(_request()) == "10.0.0.9"

    def test_ignores_forwarded_headers_when_untrusted(self):
        request = _request({"X-Forwarded-For": "203.0.113.7"})
        assert client_identifier(request, trust_forwarded=False) == "10.0.0.9"

    def test_unknown_without_any_source(self):
        assert client_identifier(_request(client=None)) == "unknown"


def test_hash_key_is_short_stable_and_opaque():
    digest = hash_key("login:203.0.113.7")

    assert digest == hash_key("login:203.0.113.7")
    assert len(digest) == 16
    assert digest != hash_key("login:203.0.113.8")
