from __future__ import annotations

import json
import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from whatsorder.core.rate_limiter import InMemoryRateLimiterService, RateLimiterService

logger = logging.getLogger(__name__)

# (method, path) pairs reachable without a credential that accept writes
PROTECTED_PUBLIC_ROUTES = frozenset({("POST", "/api/orders")})
UNKNOWN_STOREFRONT = "-"


class PublicRateLimitMiddleware(BaseHTTPMiddleware):
    """Throttles public order logs per client and storefront.

    ``trusted_proxy_hops`` is the number of reverse proxies in front of the
    app. With the default of 0, ``X-Forwarded-For`` is ignored and the socket
    peer is the client.
    """

    def __init__(
        self,
        app,
        *,
        rate_limiter: RateLimiterService | None = None,
        enabled: bool = True,
        trusted_proxy_hops: int = 0,
    ) -> None:
        super().__init__(app)
        self._rate_limiter = rate_limiter or InMemoryRateLimiterService()
        self._enabled = enabled
        self._trusted_proxy_hops = max(0, trusted_proxy_hops)

    async def dispatch(self, request: Request, call_next):
        endpoint = request.url.path.rstrip("/") or "/"
        if not self._enabled or (request.method, endpoint) not in PROTECTED_PUBLIC_ROUTES:
            return await call_next(request)

        client = client_address(request, self._trusted_proxy_hops)
        storefront = _storefront_key(await request.body())
        decision = self._rate_limiter.check(client=client, storefront=storefront)
        if not decision.allowed:
            logger.warning("[RATE_LIMIT] blocked client=%s business_id=%s", client, storefront)
            return JSONResponse(
                status_code=429,
                content={"detail": "Too many requests", "code": "rate_limited"},
                headers={
                    "Retry-After": str(decision.retry_after_seconds),
                    "X-RateLimit-Limit": str(decision.limit),
                    "X-RateLimit-Remaining": "0",
                },
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(decision.limit)
        response.headers["X-RateLimit-Remaining"] = str(decision.remaining)
        return response


def client_address(request: Request, trusted_proxy_hops: int = 0) -> str:
    peer = request.client.host if request.client and request.client.host else "unknown"
    if trusted_proxy_hops <= 0:
        return peer
    # Each trusted proxy appends the address it received from; read from the right.
    chain = [part.strip() for part in request.headers.get("X-Forwarded-For", "").split(",") if part.strip()]
    if len(chain) < trusted_proxy_hops:
        return peer
    return chain[-trusted_proxy_hops]


def _storefront_key(body: bytes) -> str:
    try:
        payload = json.loads(body or b"null")
    except ValueError:
        return UNKNOWN_STOREFRONT
    if isinstance(payload, dict) and payload.get("businessId") is not None:
        return str(payload["businessId"])
    return UNKNOWN_STOREFRONT
