"""Security headers middleware — X-Frame-Options, X-Content-Type-Options, Referrer-Policy.

Sets common security headers (clickjacking, MIME sniffing, referrer
leakage) before the wrapped handler runs, so a handler can still
override any of them for its own response.
"""

from dataclasses import dataclass

from arbor.http.request import Request
from arbor.http.response import ResponseWriter
from arbor.routing.route import Handler


@dataclass(frozen=True, slots=True)
class SecurityHeadersConfig:
    """Configuration for security headers.

    All values are applied as-is. ``None`` disables a header.
    """

    x_frame_options: str = "DENY"
    x_content_type_options: str = "nosniff"
    referrer_policy: str = "strict-origin-when-cross-origin"
    content_security_policy: str | None = (
        "default-src 'self'; base-uri 'self'; frame-ancestors 'none'; object-src 'none'"
    )
    strict_transport_security: str | None = None

    def headers(self) -> tuple[tuple[str, str], ...]:
        pairs = [
            ("X-Frame-Options", self.x_frame_options),
            ("X-Content-Type-Options", self.x_content_type_options),
            ("Referrer-Policy", self.referrer_policy),
        ]
        if self.content_security_policy:
            pairs.append(("Content-Security-Policy", self.content_security_policy))
        if self.strict_transport_security:
            pairs.append(("Strict-Transport-Security", self.strict_transport_security))
        return tuple(pairs)


class SecurityHeadersMiddleware:
    """Add security headers to every response under this router.

    Usage::

        router.use(SecurityHeadersMiddleware())

    Or with custom config::

        router.use(SecurityHeadersMiddleware(SecurityHeadersConfig(
            x_frame_options="SAMEORIGIN",
        )))
    """

    __slots__ = ("_pairs", "config")

    def __init__(self, config: SecurityHeadersConfig | None = None) -> None:
        self.config = config or SecurityHeadersConfig()
        self._pairs = self.config.headers()

    def __call__(self, next: Handler) -> Handler:
        pairs = self._pairs

        async def handler(w: ResponseWriter, r: Request) -> None:
            for name, value in pairs:
                w.headers.set(name, value)
            await next(w, r)

        return handler
