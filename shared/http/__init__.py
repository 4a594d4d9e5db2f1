"""
HTTP package - Middleware, rate limiting and error handlers shared by all modules.
"""
from shared.http.errors import register_error_handlers
from shared.http.middleware import (
    BodySizeLimitMiddleware,
    INTERNAL_TOKEN_HEADER,
    RateLimitMiddleware,
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
)
from shared.http.rate_limit import FixedWindowRateLimiter

__all__ = [
    "register_error_handlers",
    "INTERNAL_TOKEN_HEADER",
    "BodySizeLimitMiddleware",
    "RateLimitMiddleware",
    "RequestLoggingMiddleware",
    "SecurityHeadersMiddleware",
    "FixedWindowRateLimiter",
]
