"""Response helpers shared by views in several apps."""

from rest_framework import status
from rest_framework.response import Response

from .services.rate_limiting import RateLimitResult


def rate_limit_headers(result: RateLimitResult) -> dict:
    return {
        'X-RateLimit-Limit': str(result.limit),
        'X-RateLimit-Remaining': str(result.remaining),
        'X-RateLimit-Reset': result.reset_at.isoformat(),
    }


def rate_limit_exceeded_response(result: RateLimitResult) -> Response:
    """429 with ``retryAfter`` in the body and X-RateLimit-* headers."""
    return Response(
        {
            'error': result.message,
            'retryAfter': result.retry_after_seconds,
        },
        status=status.HTTP_429_TOO_MANY_REQUESTS,
        headers={
            **rate_limit_headers(result),
            'Retry-After': str(result.retry_after_seconds),
        },
    )
