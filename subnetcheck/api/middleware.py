from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
import os

OPEN_PATHS = ("/docs", "/openapi.json", "/health")

class AuthMiddleware(BaseHTTPMiddleware):
    """Require X-API-Key when SUBNETCHECK_API_KEY is set."""

    def __init__(self, app, token: str = None):
        super().__init__(app)
        self.token = token if token is not None else os.getenv("SUBNETCHECK_API_KEY", "")

    async def dispatch(self, request: Request, call_next):
        if not self.token or request.url.path.startswith(OPEN_PATHS):
            return await call_next(request)

        auth_header = request.headers.get("X-API-Key")
        if auth_header != self.token:
            return JSONResponse(status_code=403, content={"detail": "Unauthorized"})
        return await call_next(request)
