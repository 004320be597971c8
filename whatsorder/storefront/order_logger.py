from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any

import httpx

from whatsorder.storefront.client import StorefrontClient

logger = logging.getLogger(__name__)
ORDER_LOG_PREFIX = "[ORDER_LOG]"


@dataclass(frozen=True)
class OrderLogEntry:
    business_id: int
    total_price: float
    items_summary: str
    customer_note: str | None = None

    def to_payload(self) -> dict[str, Any]:
        return {
            "businessId": self.business_id,
            "customerNote": self.customer_note,
            "totalPrice": self.total_price,
            "itemsSummary": self.items_summary,
        }


class OrderLogger:
    """Fire-and-forget recording of submitted carts.

    Failures are logged and dropped; the customer flow never waits on them.
    """

    def __init__(self, client: StorefrontClient, *, executor: ThreadPoolExecutor | None = None) -> None:
        self.client = client
        self._executor = executor or ThreadPoolExecutor(max_workers=2, thread_name_prefix="order-log")

    def record(self, entry: OrderLogEntry) -> bool:
        try:
            response = self.client.post_order(entry.to_payload())
        except httpx.HTTPError as exc:
            logger.warning(
                "%s failed business_id=%s error=%s",
                ORDER_LOG_PREFIX,
                entry.business_id,
                exc.__class__.__name__,
            )
            return False
        except Exception:
            logger.exception("%s unexpected failure business_id=%s", ORDER_LOG_PREFIX, entry.business_id)
            return False
        if response.status_code >= 300:
            logger.warning(
                "%s rejected business_id=%s status=%s",
                ORDER_LOG_PREFIX,
                entry.business_id,
                response.status_code,
            )
            return False
        logger.info("%s recorded business_id=%s", ORDER_LOG_PREFIX, entry.business_id)
        return True

    def dispatch(self, entry: OrderLogEntry) -> Future:
        try:
            return self._executor.submit(self.record, entry)
        except RuntimeError:
            # executor already shut down
            logger.warning("%s dropped business_id=%s", ORDER_LOG_PREFIX, entry.business_id)
            skipped: Future = Future()
            skipped.set_result(False)
            return skipped

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
