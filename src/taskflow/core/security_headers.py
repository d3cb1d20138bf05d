"""Helmet-style security headers on every response."""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

API_CONTENT_SECURITY_POLICY = "default-src 'none'; frame-ancestors 'none'"

# Swagger UI and ReDoc load their assets from jsDelivr
DOCS_CONTENT_SECURITY_POLICY = (
    "default-src 'self'; "
    "script-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
    "style-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
    "img-src 'self' data: https://fastapi.tiangolo.com; "
    "frame-ancestors 'none'"
)
DOCS_PATHS = frozenset({"/docs", "/redoc", "/docs/oauth2-redirect"})


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds security headers to all responses, JSON API and docs pages alike.

    Headers already set by the endpoint are left untouched.
    """

    def __init__(
        self,
        app: ASGIApp,
        x_content_type_options: str = "nosniff",
        x_frame_options: str = "DENY",
        strict_transport_security: str | None = "max-age=31536000; includeSubDomains",
        referrer_policy: str = "no-referrer",
        cross_origin_opener_policy: str = "same-origin",
        permissions_policy: str | None = "camera=(), microphone=(), geolocation=()",
    ):
        super().__init__(app)
        self.headers: dict[str, str] = {
            "X-Content-Type-Options": x_content_type_options,
            "X-Frame-Options": x_frame_options,
            "Referrer-Policy": referrer_policy,
            "Cross-Origin-Opener-Policy": cross_origin_opener_policy,
        }
        if strict_transport_security:
            self.headers["Strict-Transport-Security"] = strict_transport_security
        if permissions_policy:
            self.headers["Permissions-Policy"] = permissions_policy

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        csp = (
            DOCS_CONTENT_SECURITY_POLICY
            if request.url.path in DOCS_PATHS
            else API_CONTENT_SECURITY_POLICY
        )
        response.headers.setdefault("Content-Security-Policy", csp)
        for header, value in self.headers.items():
            response.headers.setdefault(header, value)
        return response
