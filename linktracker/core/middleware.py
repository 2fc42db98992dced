"""Custom middleware for security headers and scoped CORS."""

import re

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp, Receive, Scope, Send

DEFAULT_SECURITY_HEADERS = {
    # Prevent MIME type sniffing
    "X-Content-Type-Options": "nosniff",
    # Only the dashboard is ever framed, and only by itself
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Content-Security-Policy": (
        "default-src 'self'; "
        "frame-ancestors 'self'; "
        "form-action 'self'"
    ),
    "Permissions-Policy": "camera=(), geolocation=(), microphone=(), payment=(), usb=()",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to every response.

    Strict-Transport-Security is only sent when ``enable_hsts`` is set,
    which should be the case whenever the service sits behind HTTPS.
    """

    def __init__(
        self,
        app: ASGIApp,
        enable_hsts: bool = False,
        hsts_max_age: int = 31536000,  # 1 year
    ) -> None:
        super().__init__(app)
        self.headers = dict(DEFAULT_SECURITY_HEADERS)
        if enable_hsts:
            self.headers["Strict-Transport-Security"] = f"max-age={hsts_max_age}; includeSubDomains"

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        response = await call_next(request)
        for name, value in self.headers.items():
            response.headers.setdefault(name, value)
        return response


def parent_domain_origin_regex(parent_domain: str) -> str:
    """Build an origin regex matching a domain and all of its subdomains over HTTPS."""
    domain = re.escape(parent_domain.strip().lstrip(".").lower())
    return rf"https://([a-z0-9-]+\.)*{domain}"


class ApiCORSMiddleware:
    """Apply CORS handling only to requests under ``path_prefix``.

    Redirect and dashboard routes are never cross-origin targets, so they
    pass straight through to the wrapped application.
    """

    def __init__(self, app: ASGIApp, path_prefix: str = "/api", **cors_options) -> None:
        self.app = app
        self.path_prefix = path_prefix.rstrip("/")
        self.cors = CORSMiddleware(app, **cors_options)

    def _in_scope(self, path: str) -> bool:
        return path == self.path_prefix or path.startswith(self.path_prefix + "/")

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and self._in_scope(scope["path"]):
            await self.cors(scope, receive, send)
        else:
            await self.app(scope, receive, send)
