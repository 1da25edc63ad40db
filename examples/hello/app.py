"""Hello — a route tree with a group and a mounted, protected router.

Demonstrates plain routes, root middleware, a group with its own
middleware, and a separately built router mounted behind cookie auth.

Run:
    python app.py

Then:
    curl -i localhost:4000/hello
    curl -i localhost:4000/custom-header
    curl -i localhost:4000/profile
    curl -i --cookie session_id=abc localhost:4000/profile
"""

import logging

from arbor import Handler, Request, ResponseWriter, Router, set_header
from arbor.context import ContextKey
from arbor.middleware import CookieAuth, request_logger

USER_ID: ContextKey[str] = ContextKey("user_id")

router = Router()


@router.route("GET /hello")
def hello(w: ResponseWriter, r: Request) -> None:
    w.write("world!")


router.use(request_logger())


def custom_header_group(g: Router) -> None:
    g.use(set_header("X-Custom", "true"))

    @g.route("GET /custom-header")
    def custom_header(w: ResponseWriter, r: Request) -> None:
        w.write("Check response headers!")


router.group(custom_header_group)


def attach_user(next: Handler) -> Handler:
    """Look up the user behind the session cookie (stubbed)."""

    async def handler(w: ResponseWriter, r: Request) -> None:
        await next(w, r.with_value(USER_ID, "1234"))

    return handler


protected = Router()
protected.use(CookieAuth("session_id"))
protected.use(attach_user)


@protected.route("GET /profile")
def profile(w: ResponseWriter, r: Request) -> None:
    w.write(r.value(USER_ID))


router.mount(protected)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    router.mux().serve(port=4000)
