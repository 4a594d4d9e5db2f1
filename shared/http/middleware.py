"""
HTTP Middleware - Cross-cutting request handling applied before routing.
"""
import secrets
from datetime import datetime, timezone
from typing import Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from shared.http.rate_limit import FixedWindowRateLimiter
from shared.services.logger import get_logger


logger = get_logger(__name__)

RATE_LIMIT_MESSAGE = "Too many requests from this IP, please try again later."

# Marks calls the app makes to its own API on behalf of an already counted request
INTERNAL_TOKEN_HEADER = "X-Internal-Token"

SECURITY_HEADERS = {
    "Content-Security-Policy": (
        "default-src 'self'; script-src 'self' https://unpkg.com; "
        "style-src 'self' 'unsafe-inline'; img-src 'self' data:; "
        "object-src 'none'; frame-ancestors 'self'; base-uri 'self'"
    ),
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-DNS-Prefetch-Control": "off",
    "X-Frame-Options": "SAMEORIGIN",
    "X-Permitted-Cross-Domain-Policies": "none",
}


def client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Attach standard security headers to every response."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Reject clients that exceed the limiter's budget with 429.

    Requests carrying internal_token in INTERNAL_TOKEN_HEADER are the web
    pages calling the API for a browser whose page request was already
    counted; they pass through uncounted.
    """

    def __init__(self, app, limiter: FixedWindowRateLimiter, internal_token: Optional[str] = None):
        super().__init__(app)
        self.limiter = limiter
        self.internal_token = internal_token

    def _is_internal(self, request: Request) -> bool:
        if not self.internal_token:
            return False
        presented = request.headers.get(INTERNAL_TOKEN_HEADER, "")
        return secrets.compare_digest(presented.encode(), self.internal_token.encode())

    async def dispatch(self, request: Request, call_next):
        if self._is_internal(request):
            return await call_next(request)

        ip = client_ip(request)
        decision = self.limiter.hit(ip)
        headers = {
            "X-RateLimit-Limit": str(decision.limit),
            "X-RateLimit-Remaining": str(decision.remaining),
            "X-RateLimit-Reset": str(decision.retry_after),
        }

        if not decision.allowed:
            logger.warning(f"Rate limit exceeded for {ip}: {request.method} {request.url.path}")
            headers["Retry-After"] = str(decision.retry_after)
            return JSONResponse(
                status_code=429,
                content={"error": RATE_LIMIT_MESSAGE},
                headers=headers,
            )

        response = await call_next(request)
        response.headers.update(headers)
        return response


class BodySizeLimitMiddleware(BaseHTTPMiddleware):
    """Reject requests whose declared body is larger than max_bytes."""

    def __init__(self, app, max_bytes: int):
        super().__init__(app)
        self.max_bytes = max_bytes

    async def dispatch(self, request: Request, call_next):
        content_length = request.headers.get("content-length")
        if content_length is not None:
            try:
                too_large = int(content_length) > self.max_bytes
            except ValueError:
                return JSONResponse(status_code=400, content={"error": "Invalid Content-Length"})
            if too_large:
                logger.warning(
                    f"Rejected {request.method} {request.url.path}: "
                    f"body of {content_length} bytes exceeds {self.max_bytes}"
                )
                return JSONResponse(status_code=413, content={"error": "Request entity too large"})

        return await call_next(request)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log one line per inbound request."""

    async def dispatch(self, request: Request, call_next):
        logger.info(f"{datetime.now(timezone.utc).isoformat()} - {request.method} {request.url.path}")
        return await call_next(request)
