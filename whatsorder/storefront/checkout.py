"""Cart checkout flow for one storefront visit.

BROWSING -> REVIEWING (checkout open) -> SUBMITTING -> BROWSING. Submitting
hands the WhatsApp deep link to an opener and queues the order log in the
background; the log outcome never reaches the customer.
"""
from __future__ import annotations

import enum
import logging
import webbrowser
from dataclasses import dataclass
from typing import Callable

from whatsorder.storefront.cart import Cart
from whatsorder.storefront.client import Storefront
from whatsorder.storefront.message import (
    CustomerDetails,
    build_items_summary,
    build_whatsapp_link,
    compose_order_message,
)
from whatsorder.storefront.order_logger import OrderLogEntry, OrderLogger

logger = logging.getLogger(__name__)

LinkOpener = Callable[[str], object]


class CheckoutState(str, enum.Enum):
    BROWSING = "browsing"
    REVIEWING = "reviewing"
    SUBMITTING = "submitting"


class CheckoutError(Exception):
    pass


@dataclass(frozen=True)
class SubmittedOrder:
    message: str
    link: str
    total: float
    items_summary: str


def open_in_new_tab(url: str) -> bool:
    return webbrowser.open_new_tab(url)


class StorefrontSession:
    def __init__(
        self,
        storefront: Storefront,
        *,
        order_logger: OrderLogger | None = None,
        opener: LinkOpener = open_in_new_tab,
    ) -> None:
        self.storefront = storefront
        self.cart = Cart(storefront.products)
        self.order_logger = order_logger
        self.opener = opener
        self.state = CheckoutState.BROWSING

    def increment(self, product_id: int) -> int:
        return self.cart.increment(product_id)

    def decrement(self, product_id: int) -> int:
        return self.cart.decrement(product_id)

    def total(self) -> float:
        return self.cart.total()

    def open_checkout(self) -> None:
        if self.cart.is_empty():
            raise CheckoutError("Add at least one item before checking out")
        self.state = CheckoutState.REVIEWING

    def close_checkout(self) -> None:
        if self.state is CheckoutState.REVIEWING:
            self.state = CheckoutState.BROWSING

    def submit(self, customer: CustomerDetails) -> SubmittedOrder:
        if self.state is not CheckoutState.REVIEWING:
            raise CheckoutError("Checkout is not open")
        if not customer.name.strip() or not customer.phone.strip():
            raise CheckoutError("Name and phone number are required")

        business = self.storefront.business
        lines = self.cart.lines()
        self.state = CheckoutState.SUBMITTING
        try:
            total = sum(line.subtotal for line in lines)
            message = compose_order_message(business.name, customer, lines, business.currency_symbol)
            items_summary = build_items_summary(lines, business.currency_symbol)
            link = build_whatsapp_link(business.whatsapp_number, message)

            if self.order_logger is not None:
                self.order_logger.dispatch(
                    OrderLogEntry(
                        business_id=business.id,
                        total_price=total,
                        items_summary=items_summary,
                        customer_note=(customer.note or "").strip() or None,
                    )
                )
            self.opener(link)
            self.cart.clear()
            logger.info("[CHECKOUT] submitted business_id=%s total=%s", business.id, total)
            return SubmittedOrder(message=message, link=link, total=total, items_summary=items_summary)
        finally:
            self.state = CheckoutState.BROWSING
