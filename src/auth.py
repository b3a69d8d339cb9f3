import secrets

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse


class BearerAuthMiddleware(BaseHTTPMiddleware):
    """Guard the streamable-http transport with a static bearer token."""

    def __init__(self, app, token: str):
        super().__init__(app)
        self.expected = f"Bearer {token}".encode()

    async def dispatch(self, request: Request, call_next):
        if request.url.path == "/health":
            return await call_next(request)

        provided = request.headers.get("authorization", "").encode()
        if not secrets.compare_digest(provided, self.expected):
            return JSONResponse(
                {"error": "Unauthorized"},
                status_code=401,
                headers={"www-authenticate": "Bearer"},
            )
        return await call_next(request)
