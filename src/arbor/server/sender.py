"""ASGI response sending — translates a ResponseWriter to ASGI messages."""

from arbor._internal.asgi import Send
from arbor.http.response import ResponseWriter

DEFAULT_CONTENT_TYPE = "text/plain; charset=utf-8"


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


async def send_writer(writer: ResponseWriter, send: Send, *, head: bool = False) -> None:
    """Send the status, committed headers, and body of *writer*.

    A missing ``Content-Type`` defaults to plain text when there is a
    body. ``Content-Length`` is always computed here. For ``HEAD``
    requests the length of the would-be body is sent without the body.
    """
    status = writer.status
    body = writer.body if _body_allowed(status) else b""

    raw_headers: list[tuple[bytes, bytes]] = []
    has_content_type = False
    for name, value in writer.sent_headers:
        lower = name.lower()
        if lower == "content-length":
            continue
        if lower == "content-type":
            has_content_type = True
        raw_headers.append((lower.encode("latin-1"), value.encode("latin-1")))
    if body and not has_content_type:
        raw_headers.append((b"content-type", DEFAULT_CONTENT_TYPE.encode("latin-1")))
    raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))

    await send(
        {
            "type": "http.response.start",
            "status": status,
            "headers": raw_headers,
        }
    )
    await send(
        {
            "type": "http.response.body",
            "body": b"" if head else body,
        }
    )
