"""Run a built mux on the pounce ASGI server.

pounce's ``run()`` takes an import string (e.g. ``"myapp:mux"``), but
arbor hands over a live ``Mux`` object, so ``pounce.Server`` is used
directly with the ASGI callable. pounce is imported lazily so that
building and testing route trees never requires it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from arbor.config import ServerConfig

if TYPE_CHECKING:
    from arbor.routing.mux import Mux
    from arbor.routing.router import Router

logger = logging.getLogger("arbor.server")


def pounce_options(config: ServerConfig) -> dict[str, Any]:
    """Translate a ``ServerConfig`` into ``pounce.config.ServerConfig`` kwargs.

    Debug mode forces a single worker with reload, matching how pounce
    expects to run a development server.
    """
    if config.debug:
        return {
            "host": config.host,
            "port": config.port,
            "workers": 1,
            "reload": True,
            "log_level": "debug",
            "keep_alive_timeout": config.keep_alive_timeout,
        }
    return {
        "host": config.host,
        "port": config.port,
        "workers": config.workers,
        "reload": config.reload,
        "log_level": config.log_level,
        "keep_alive_timeout": config.keep_alive_timeout,
    }


def serve(
    app: Mux | Router,
    config: ServerConfig | None = None,
    *,
    host: str | None = None,
    port: int | None = None,
    **overrides: Any,
) -> None:
    """Serve *app* until the process is stopped.

    Args:
        app: A built ``Mux``, or a ``Router`` which is built here.
        config: Server settings. Defaults to ``ServerConfig()``.
        host: Override bind host.
        port: Override bind port.
        overrides: Any other ``ServerConfig`` field.
    """
    from pounce.config import ServerConfig as PounceConfig
    from pounce.server import Server

    from arbor.routing.router import Router

    mux = app.mux() if isinstance(app, Router) else app
    cfg = (config or ServerConfig()).with_overrides(host=host, port=port, **overrides)
    mux.freeze()

    logger.info(
        "serving %d pattern(s) on http://%s:%d", len(mux.bindings), cfg.host, cfg.port
    )
    server = Server(PounceConfig(**pounce_options(cfg)), mux)
    server.run()
