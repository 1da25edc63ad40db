"""Server configuration.

``ServerConfig`` is a frozen dataclass validated on creation. ``serve()``
translates it into pounce's own config.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

_LOG_LEVELS = frozenset({"debug", "info", "warning", "error", "critical"})


@dataclass(frozen=True, slots=True)
class ServerConfig:
    """How ``serve()`` runs a built mux. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = ServerConfig(port=4000, workers=4)
    """

    host: str = "127.0.0.1"
    port: int = 8000

    # 0 = auto-detect from CPU count; 1 in debug mode
    workers: int = 0

    # Development: single worker with auto-reload
    debug: bool = False
    reload: bool = False

    log_level: str = "info"
    keep_alive_timeout: float = 5.0

    def __post_init__(self) -> None:
        if not 0 <= self.port <= 65535:
            msg = f"port must be between 0 and 65535, got {self.port}"
            raise ValueError(msg)
        if self.workers < 0:
            msg = f"workers must be >= 0, got {self.workers}"
            raise ValueError(msg)
        if self.log_level not in _LOG_LEVELS:
            msg = f"log_level must be one of {sorted(_LOG_LEVELS)}, got {self.log_level!r}"
            raise ValueError(msg)

    def with_overrides(self, **overrides: object) -> ServerConfig:
        """Return a copy with the non-``None`` *overrides* applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes)  # type: ignore[arg-type]
