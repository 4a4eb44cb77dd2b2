"""Credential comparison, caller identity, CORS and security headers."""

from __future__ import annotations

import hmac
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, Optional

from fastapi import Request, Response


SECURITY_HEADERS: Dict[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Permissions-Policy": "geolocation=(), microphone=(), camera=()",
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
}


def credentials_match(supplied: object, expected: str) -> bool:
    """Compare a caller credential against the configured secret.

    Lengths are compared first, then ``hmac.compare_digest`` checks the bytes
    in time independent of where the first mismatch sits.
    """
    if not isinstance(supplied, str) or not supplied or not expected:
        return False
    try:
        a = supplied.encode("utf-8")
        b = expected.encode("utf-8")
    except UnicodeEncodeError:
        return False
    if len(a) != len(b):
        return False
    return hmac.compare_digest(a, b)


def client_identity(request: Request) -> str:
    """First ``X-Forwarded-For`` hop, else the peer address, else ``unknown``."""
    forwarded = request.headers.get("x-forwarded-for", "")
    first = forwarded.split(",")[0].strip()
    if first:
        return first
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


@dataclass(frozen=True)
class OriginCheck:
    """Outcome of matching a request Origin against the configured one."""

    allowed: bool
    headers: Dict[str, str] = field(default_factory=dict)


def check_origin(origin: Optional[str], allowed_origin: str) -> OriginCheck:
    if not allowed_origin:
        return OriginCheck(True)
    if origin == allowed_origin:
        return OriginCheck(
            True,
            {
                "Access-Control-Allow-Origin": allowed_origin,
                "Vary": "Origin",
                "Access-Control-Allow-Methods": "POST, OPTIONS",
                "Access-Control-Allow-Headers": "Content-Type",
            },
        )
    if origin:
        return OriginCheck(False)
    # Same-origin and non-browser callers send no Origin header
    return OriginCheck(True)


async def security_headers_middleware(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    response = await call_next(request)
    for name, value in SECURITY_HEADERS.items():
        response.headers[name] = value
    return response
