"""Cookie header parsing and ``Set-Cookie`` values.

``parse_cookies`` fills ``Request.cookies``; ``SetCookie`` is what
``ResponseWriter.set_cookie`` serializes.
"""

from dataclasses import dataclass


def parse_cookies(header: str) -> dict[str, str]:
    """Split a ``Cookie`` header into a name -> value dict.

    Fragments without ``=`` are ignored. Later duplicates win.
    """
    cookies: dict[str, str] = {}
    for fragment in header.split(";") if header else ():
        name, sep, value = fragment.partition("=")
        if sep:
            cookies[name.strip()] = value.strip()
    return cookies


@dataclass(frozen=True, slots=True)
class SetCookie:
    """One ``Set-Cookie`` directive. ``HttpOnly`` and ``SameSite=lax`` by default."""

    name: str
    value: str
    max_age: int | None = None
    path: str = "/"
    domain: str | None = None
    secure: bool = False
    httponly: bool = True
    samesite: str = "lax"

    def to_header_value(self) -> str:
        attributes = [
            ("Max-Age", None if self.max_age is None else str(self.max_age)),
            ("Path", self.path or None),
            ("Domain", self.domain),
        ]
        parts = [f"{self.name}={self.value}"]
        parts.extend(f"{key}={val}" for key, val in attributes if val is not None)
        if self.secure:
            parts.append("Secure")
        if self.httponly:
            parts.append("HttpOnly")
        if self.samesite:
            parts.append(f"SameSite={self.samesite}")
        return "; ".join(parts)
