"""Middleware — handler-to-handler transforms, no inheritance required.

A middleware is any callable matching:
    def mw(next: Handler) -> Handler

Built-in middleware:
    CookieAuth -- 401 without a session cookie, typed context value otherwise
    CORSMiddleware -- Cross-Origin Resource Sharing
    SecurityHeadersMiddleware -- X-Frame-Options, X-Content-Type-Options, Referrer-Policy
    recoverer -- Log an escaping exception and answer 500
    request_id -- Attach and echo an X-Request-ID
    request_logger -- One access log line per request
    set_header -- Set a fixed response header
"""

from arbor.middleware.auth import SESSION_ID, CookieAuth
from arbor.middleware.builtin import (
    REQUEST_ID,
    recoverer,
    request_id,
    request_logger,
    set_header,
)
from arbor.middleware.cors import CORSConfig, CORSMiddleware
from arbor.middleware.protocol import Middleware, apply_chain, chain
from arbor.middleware.security_headers import (
    SecurityHeadersConfig,
    SecurityHeadersMiddleware,
)

__all__ = [
    "REQUEST_ID",
    "SESSION_ID",
    "CORSConfig",
    "CORSMiddleware",
    "CookieAuth",
    "Middleware",
    "SecurityHeadersConfig",
    "SecurityHeadersMiddleware",
    "apply_chain",
    "chain",
    "recoverer",
    "request_id",
    "request_logger",
    "set_header",
]
