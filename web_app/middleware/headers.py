"""Owner header middleware."""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from typing import Callable

from shorturl.common.headers import extract_owner_id, DEFAULT_OWNER_HEADER


class OwnerHeaderMiddleware(BaseHTTPMiddleware):
    """Store the owner id forwarded by the authenticating proxy on request state."""

    def __init__(self, app, header_name: str = DEFAULT_OWNER_HEADER):
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next: Callable):
        request.state.owner_id = extract_owner_id(request.headers, self.header_name)
        return await call_next(request)
