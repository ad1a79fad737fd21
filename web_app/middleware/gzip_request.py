"""Request body decompression middleware."""

import gzip
import zlib
import logging
from typing import Optional

from starlette.datastructures import Headers
from starlette.responses import PlainTextResponse
from starlette.types import ASGIApp, Receive, Scope, Send


class GZipRequestMiddleware:
    """Inflate request bodies sent with ``Content-Encoding: gzip``.

    Starlette's ``GZipMiddleware`` only compresses responses. This one reads
    the whole compressed body, inflates it and hands the route a plain body
    with the encoding header removed. A body that does not inflate is
    answered with 400.
    """

    def __init__(self, app: ASGIApp, logger: Optional[logging.Logger] = None):
        self.app = app
        self.logger = logger or logging.getLogger("shorturl.web")

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = Headers(scope=scope)
        if "gzip" not in headers.get("content-encoding", "").lower():
            await self.app(scope, receive, send)
            return

        chunks = []
        more_body = True
        while more_body:
            message = await receive()
            if message["type"] != "http.request":
                return
            chunks.append(message.get("body", b""))
            more_body = message.get("more_body", False)

        try:
            body = gzip.decompress(b"".join(chunks))
        except (OSError, EOFError, zlib.error) as e:
            self.logger.debug(f"Rejected gzip body on {scope.get('path')}: {e}")
            response = PlainTextResponse("invalid gzip body", status_code=400)
            await response(scope, receive, send)
            return

        scope = dict(scope)
        scope["headers"] = [
            (name, value)
            for name, value in scope["headers"]
            if name.lower() not in (b"content-encoding", b"content-length")
        ] + [(b"content-length", str(len(body)).encode("latin-1"))]

        delivered = False

        async def receive_inflated():
            nonlocal delivered
            if not delivered:
                delivered = True
                return {"type": "http.request", "body": body, "more_body": False}
            return await receive()

        await self.app(scope, receive_inflated, send)
