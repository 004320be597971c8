from __future__ import annotations

import logging
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from whatsorder.core.metrics import request_metrics
from whatsorder.core.request_context import clear_request_context, set_request_context

logger = logging.getLogger(__name__)


class ObservabilityMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        set_request_context(request_id=request_id)

        status_code = 500
        endpoint = request.url.path
        method = request.method
        response = None

        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            owner_id = _extract_owner_id(request)
            business_id = _extract_business_id(request)
            duration_ms = round((time.perf_counter() - start) * 1000, 2)

            set_request_context(business_id=business_id, owner_id=owner_id)
            request_metrics.observe(
                endpoint=endpoint,
                method=method,
                status_code=status_code,
                duration_ms=duration_ms,
                business_id=business_id,
            )

            logger.info(
                "request completed",
                extra={
                    "request_id": request_id,
                    "business_id": business_id,
                    "owner_id": owner_id,
                    "endpoint": endpoint,
                    "method": method,
                    "status_code": status_code,
                    "duration_ms": duration_ms,
                },
            )

            if response is not None:
                response.headers["X-Request-ID"] = request_id

            clear_request_context()


def _extract_owner_id(request: Request) -> str | None:
    owner = getattr(request.state, "owner", None)
    if owner is None:
        return None
    subject = getattr(owner, "subject", None)
    return str(subject) if subject else None


def _extract_business_id(request: Request) -> str | None:
    business_id = getattr(request.state, "business_id", None)
    return str(business_id) if business_id is not None else None
