"""
Users API — Security Headers Middleware
========================================

What:  Adds the standard set of HTTP hardening headers to every response.
Why:   Browsers enforce these (MIME sniffing, framing, referrer leakage, HTTPS
       upgrades) even for a JSON-only API; the values are the common defaults
       of well-known hardening middleware, with no custom policy.
How:   Sets each header unless the route already set it.

Excluded paths:
    /docs and /redoc load Swagger UI / ReDoc assets from a CDN and use inline
    scripts; they keep every header except Content-Security-Policy.
"""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

CONTENT_SECURITY_POLICY = (
    "default-src 'self';"
    "base-uri 'self';"
    "font-src 'self' https: data:;"
    "form-action 'self';"
    "frame-ancestors 'self';"
    "img-src 'self' data:;"
    "object-src 'none';"
    "script-src 'self';"
    "script-src-attr 'none';"
    "style-src 'self' https: 'unsafe-inline';"
    "upgrade-insecure-requests"
)

DEFAULT_SECURITY_HEADERS = {
    "Content-Security-Policy": CONTENT_SECURITY_POLICY,
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
    "Origin-Agent-Cluster": "?1",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-DNS-Prefetch-Control": "off",
    "X-Download-Options": "noopen",
    "X-Frame-Options": "SAMEORIGIN",
    "X-Permitted-Cross-Domain-Policies": "none",
    "X-XSS-Protection": "0",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Applies DEFAULT_SECURITY_HEADERS to every response."""

    CSP_EXCLUDED_PATHS = {"/docs", "/redoc", "/docs/oauth2-redirect"}

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        response = await call_next(request)

        for name, value in DEFAULT_SECURITY_HEADERS.items():
            if name == "Content-Security-Policy" and request.url.path in self.CSP_EXCLUDED_PATHS:
                continue
            if name not in response.headers:
                response.headers[name] = value

        return response
