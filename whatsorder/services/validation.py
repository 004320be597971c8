"""Field rules shared by the request schemas.

Each helper returns the cleaned value or raises ``ValueError`` with a message
fit for the client; pydantic turns that into a 400 response.
"""
from __future__ import annotations

import re
from decimal import Decimal

from whatsorder.utils.slug import SLUG_MAX_LENGTH, is_valid_slug

BUSINESS_NAME_MAX_LENGTH = 100
ITEM_NAME_MAX_LENGTH = 50
WHATSAPP_MIN_DIGITS = 10
WHATSAPP_MAX_DIGITS = 15

# Prices are stored as NUMERIC(12, 2)
PRICE_MAX = 9_999_999_999.99
PRICE_DECIMAL_PLACES = 2

# Path segments under /api/businesses that a slug would shadow.
RESERVED_SLUGS = frozenset({"me", "slug-suggestion"})

_PHONE_SEPARATORS = re.compile(r"[\s\-().]")


def clean_business_name(value: str) -> str:
    name = (value or "").strip()
    if not name:
        raise ValueError("Business name is required")
    if len(name) > BUSINESS_NAME_MAX_LENGTH:
        raise ValueError(f"Business name must be at most {BUSINESS_NAME_MAX_LENGTH} characters")
    return name


def clean_slug(value: str) -> str:
    slug = (value or "").strip()
    if not slug:
        raise ValueError("Link slug is required")
    if len(slug) > SLUG_MAX_LENGTH:
        raise ValueError(f"Link slug must be at most {SLUG_MAX_LENGTH} characters")
    if not is_valid_slug(slug):
        raise ValueError("Link slug may only contain lowercase letters, numbers and hyphens")
    if slug in RESERVED_SLUGS:
        raise ValueError("This link is reserved")
    return slug


def clean_whatsapp_number(value: str) -> str:
    raw = (value or "").strip()
    if not raw:
        raise ValueError("WhatsApp number is required")
    digits = _PHONE_SEPARATORS.sub("", raw)
    if digits.startswith("+"):
        digits = digits[1:]
    if not digits.isdigit():
        raise ValueError("WhatsApp number must contain digits only")
    if not WHATSAPP_MIN_DIGITS <= len(digits) <= WHATSAPP_MAX_DIGITS:
        raise ValueError(
            f"WhatsApp number must have between {WHATSAPP_MIN_DIGITS} and {WHATSAPP_MAX_DIGITS} digits"
        )
    return digits


def clean_item_name(value: str, *, label: str = "Name", max_length: int | None = ITEM_NAME_MAX_LENGTH) -> str:
    name = (value or "").strip()
    if not name:
        raise ValueError(f"{label} is required")
    if max_length is not None and len(name) > max_length:
        raise ValueError(f"{label} must be at most {max_length} characters")
    return name


def clean_optional_text(value: str | None) -> str | None:
    if value is None:
        return None
    text = value.strip()
    return text or None


def clean_price(value: float, *, label: str = "Price") -> float:
    exponent = Decimal(str(value)).normalize().as_tuple().exponent
    if isinstance(exponent, int) and -exponent > PRICE_DECIMAL_PLACES:
        raise ValueError(f"{label} may have at most {PRICE_DECIMAL_PLACES} decimal places")
    return value
