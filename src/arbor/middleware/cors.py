"""CORS middleware.

Answers preflight requests itself and adds the CORS response headers to
everything else coming from an allowed origin.
"""

from dataclasses import dataclass

from arbor.http.headers import MutableHeaders
from arbor.http.request import Request
from arbor.http.response import ResponseWriter
from arbor.routing.route import Handler


@dataclass(frozen=True, slots=True)
class CORSConfig:
    """CORS middleware configuration.

    All fields have secure defaults (nothing is allowed).
    Override what you need::

        CORSConfig(
            allow_origins=("https://example.com",),
            allow_methods=("GET", "POST"),
        )
    """

    allow_origins: tuple[str, ...] = ()
    allow_methods: tuple[str, ...] = ("GET", "HEAD", "OPTIONS")
    allow_headers: tuple[str, ...] = ()
    expose_headers: tuple[str, ...] = ()
    allow_credentials: bool = False
    max_age: int = 600  # 10 minutes


class CORSMiddleware:
    """Standards-compliant CORS middleware.

    Handles:
    - Preflight ``OPTIONS`` requests (answered with 204, never forwarded)
    - Simple and actual requests (CORS headers set before the handler runs)
    - Credential support (``Access-Control-Allow-Credentials``)
    - Wildcard origins (``"*"``) when credentials are disabled

    Install it on the built mux, so preflights reach it even for paths
    with no ``OPTIONS`` pattern::

        mux = router.mux()
        mux.use(CORSMiddleware(CORSConfig(
            allow_origins=("https://example.com",),
            allow_methods=("GET", "POST", "PUT"),
            allow_headers=("Content-Type", "Authorization"),
        )))

    With ``router.use`` it only runs for matched routes: response headers
    are still added, but preflights to those paths get the mux's 405.
    """

    __slots__ = ("config",)

    def __init__(self, config: CORSConfig | None = None) -> None:
        self.config = config or CORSConfig()

    def _is_allowed_origin(self, origin: str) -> bool:
        if "*" in self.config.allow_origins:
            return True
        return origin in self.config.allow_origins

    def _add_cors_headers(self, headers: MutableHeaders, origin: str) -> None:
        cfg = self.config

        if "*" in cfg.allow_origins and not cfg.allow_credentials:
            headers.set("Access-Control-Allow-Origin", "*")
        else:
            headers.set("Access-Control-Allow-Origin", origin)
            headers.add("Vary", "Origin")

        if cfg.allow_credentials:
            headers.set("Access-Control-Allow-Credentials", "true")

        if cfg.expose_headers:
            headers.set("Access-Control-Expose-Headers", ", ".join(cfg.expose_headers))

    def _preflight(self, w: ResponseWriter, origin: str, request_method: str | None) -> None:
        cfg = self.config
        self._add_cors_headers(w.headers, origin)
        if request_method:
            w.headers.set("Access-Control-Allow-Methods", ", ".join(cfg.allow_methods))
        if cfg.allow_headers:
            w.headers.set("Access-Control-Allow-Headers", ", ".join(cfg.allow_headers))
        w.headers.set("Access-Control-Max-Age", str(cfg.max_age))
        w.write_header(204)

    def __call__(self, next: Handler) -> Handler:
        async def handler(w: ResponseWriter, r: Request) -> None:
            origin = r.headers.get("origin")

            # No Origin header, or an origin we do not allow: pass through
            if origin is None or not self._is_allowed_origin(origin):
                await next(w, r)
                return

            if r.method == "OPTIONS":
                self._preflight(w, origin, r.headers.get("access-control-request-method"))
                return

            self._add_cors_headers(w.headers, origin)
            await next(w, r)

        return handler
