"""Shared endpoint dependencies."""

import math

from fastapi import HTTPException, Request

import structlog

from app.services.rate_limiter import rate_limiter

logger = structlog.get_logger()


def enforce_rate_limit(request: Request) -> str:
    """Consume one token for the calling IP, 429 when the bucket is empty."""
    client_ip = request.client.host if request.client else "unknown"
    if not rate_limiter.allow_request(client_ip):
        logger.warning("rate_limited", client_ip=client_ip, path=request.url.path)
        raise HTTPException(
            status_code=429,
            detail={
                "error": "rate_limited",
                "message": "Trop de requêtes. Réessayez plus tard.",
                "retry_after_seconds": math.ceil(rate_limiter.retry_after(client_ip)),
            },
        )
    return client_ip
