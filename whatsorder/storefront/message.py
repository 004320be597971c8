"""WhatsApp order message and deep link composition."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from urllib.parse import quote

from whatsorder.storefront.cart import CartLine

WHATSAPP_LINK_BASE = "https://wa.me/"
SEPARATOR = "----------------"
NOT_AVAILABLE = "N/A"
SIGNATURE = "_Sent via WhatsOrder_"


@dataclass(frozen=True)
class CustomerDetails:
    name: str
    phone: str
    note: str | None = None


def format_amount(value: float) -> str:
    """Thousands separators, at most two decimals, trailing zeros dropped."""
    amount = Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    text = f"{amount:,.2f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _line_text(line: CartLine, currency_symbol: str) -> str:
    return f"• {line.quantity}x {line.product.name} — {currency_symbol}{format_amount(line.subtotal)}"


def build_items_summary(lines: list[CartLine], currency_symbol: str) -> str:
    total = sum(line.subtotal for line in lines)
    body = [_line_text(line, currency_symbol) for line in lines]
    body.append(f"Total: {currency_symbol}{format_amount(total)}")
    return "\n".join(body)


def compose_order_message(
    business_name: str,
    customer: CustomerDetails,
    lines: list[CartLine],
    currency_symbol: str,
) -> str:
    note = (customer.note or "").strip() or NOT_AVAILABLE
    total = sum(line.subtotal for line in lines)
    parts = [
        f"*New Order for {business_name}*",
        f"Customer: {customer.name} ({customer.phone})",
        f"Address: {note}",
        SEPARATOR,
        *[_line_text(line, currency_symbol) for line in lines],
        SEPARATOR,
        f"*Total Amount: {currency_symbol}{format_amount(total)}*",
        "",
        "*Delivery Details:*",
        note,
        "",
        SIGNATURE,
    ]
    return "\n".join(parts)


def build_whatsapp_link(whatsapp_number: str, message: str) -> str:
    digits = "".join(ch for ch in whatsapp_number or "" if ch.isdigit())
    return f"{WHATSAPP_LINK_BASE}{digits}?text={quote(message, safe='')}"
