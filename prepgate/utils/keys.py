"""Helpers for building limiter/cache keys.

Keys follow a colon-delimited ``<domain>:<subdomain>:<identifier>`` convention
(``external:github:203.0.113.7``, ``login:203.0.113.7``) so keys from different
call sites never collide.
"""

from __future__ import annotations

import hashlib
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from starlette.requests import Request

KEY_SEPARATOR = ":"
UNKNOWN_CLIENT = "unknown"


def build_key(*parts: object) -> str:
    """Join key parts with ``:``.

    Separators inside a part are percent-escaped so an identifier such as an
    IPv6 address cannot spill into a neighbouring namespace.

    Examples:
        >>> build_key("external", "github", "octocat")
        'external:github:octocat'
        >>> build_key("login", "::1")
        'login:%3A%3A1'

    Raises:
        ValueError: If no parts are given or a part is blank.
    """

    if not parts:
        raise ValueError("at least one key part is required")

    cleaned: list[str] = []
    for part in parts:
        text = str(part).strip()
        if not text:
            raise ValueError("key parts must be non-empty")
        cleaned.append(text.replace("%", "%25").replace(KEY_SEPARATOR, "%3A"))
    return KEY_SEPARATOR.join(cleaned)


def client_identifier(request: "Request", *, trust_forwarded: bool = True) -> str:
    """Best-effort client address for admission control.

    Order: first ``X-Forwarded-For`` hop, ``X-Real-IP``, socket peer,
    then ``"unknown"``.
    """

    if trust_forwarded:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            first_hop = forwarded.split(",")[0].strip()
            if first_hop:
                return first_hop
        real_ip = (request.headers.get("x-real-ip") or "").strip()
        if real_ip:
            return real_ip

    if request.client and request.client.host:
        return request.client.host
    return UNKNOWN_CLIENT


def hash_key(key: str) -> str:
    """Hash a key for logging without exposing client identifiers."""
    return hashlib.sha256(key.encode()).hexdigest()[:16]
