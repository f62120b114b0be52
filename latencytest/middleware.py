import functools
import math
import time

from fastapi import Request
from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send


def _content_length(headers) -> float:
    try:
        size = float(headers.get("content-length"))
    except (TypeError, ValueError):
        return 0.0
    # counters only accept finite, non-negative increments
    return size if math.isfinite(size) and size >= 0 else 0.0


class InstrumentMiddleware:
    """
    Observe response time and bytes sent around the whole app.

    Runs at the ASGI level so the elapsed time covers the full response body,
    including streamed files. The metrics object is taken from the app state.
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        metrics = scope["app"].state.metrics
        size = 0.0

        async def send_wrapper(message: Message):
            nonlocal size
            if message["type"] == "http.response.start":
                size = _content_length(Headers(raw=message.get("headers", [])))
            await send(message)

        t0 = time.time()
        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            metrics.response_time.observe(time.time() - t0)
            metrics.sizes.labels(path=scope["path"], method=scope["method"]).inc(size)


def counted(endpoint):
    """Count each call of a route by response code and method."""

    @functools.wraps(endpoint)
    async def wrapper(request: Request):
        response = await endpoint(request)
        request.app.state.metrics.requests.labels(
            code=str(response.status_code), method=request.method
        ).inc()
        return response

    return wrapper
