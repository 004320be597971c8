from urllib.parse import unquote

import pytest

from whatsorder.storefront.cart import Cart, CartProduct, UnknownProductError
from whatsorder.storefront.checkout import CheckoutError, CheckoutState, StorefrontSession
from whatsorder.storefront.client import (
    Storefront,
    StorefrontBusiness,
    StorefrontCategory,
)
from whatsorder.storefront.message import CustomerDetails, build_items_summary, format_amount

EGUSI = CartProduct(id=1, name="Egusi Soup", price=1000, category_id=10)
ZOBO = CartProduct(id=2, name="Zobo", price=500)
PUFF = CartProduct(id=3, name="Puff Puff", price=150.5, category_id=10)


class _RecordingLogger:
    def __init__(self):
        self.entries = []

    def dispatch(self, entry):
        self.entries.append(entry)


def _storefront() -> Storefront:
    return Storefront(
        business=StorefrontBusiness(
            id=7,
            name="Mama Cass Kitchen",
            slug="mama-cass-kitchen",
            whatsapp_number="+234 801 234 5678",
            currency_symbol="₦",
        ),
        products=[EGUSI, ZOBO, PUFF],
        categories=[StorefrontCategory(id=10, name="Soups"), StorefrontCategory(id=11, name="Empty")],
    )


def test_cart_total_over_non_zero_lines():
    cart = Cart([EGUSI, ZOBO, PUFF])

    cart.increment(EGUSI.id)
    cart.increment(PUFF.id)
    cart.increment(ZOBO.id)
    cart.increment(EGUSI.id)
    cart.decrement(PUFF.id)

    assert cart.total() == 2500
    assert [(line.product.name, line.quantity) for line in cart.lines()] == [("Egusi Soup", 2), ("Zobo", 1)]


def test_cart_total_does_not_depend_on_operation_order():
    interleaved = Cart([EGUSI, ZOBO, PUFF])
    for step, product_id in [
        ("inc", PUFF.id),
        ("inc", EGUSI.id),
        ("dec", PUFF.id),
        ("inc", ZOBO.id),
        ("inc", PUFF.id),
        ("inc", EGUSI.id),
        ("inc", PUFF.id),
    ]:
        getattr(interleaved, "increment" if step == "inc" else "decrement")(product_id)

    grouped = Cart([EGUSI, ZOBO, PUFF])
    grouped.increment(ZOBO.id)
    grouped.increment(EGUSI.id)
    grouped.increment(EGUSI.id)
    for _ in range(3):
        grouped.increment(PUFF.id)
    grouped.decrement(PUFF.id)

    assert interleaved.total() == grouped.total() == 2801
    assert [(line.product.id, line.quantity) for line in interleaved.lines()] == [
        (line.product.id, line.quantity) for line in grouped.lines()
    ]


def test_decrement_at_zero_stays_zero():
    cart = Cart([EGUSI])

    assert cart.decrement(EGUSI.id) == 0
    cart.increment(EGUSI.id)
    cart.decrement(EGUSI.id)
    assert cart.decrement(EGUSI.id) == 0
    assert cart.quantity(EGUSI.id) == 0
    assert cart.is_empty()


def test_unknown_product_is_rejected():
    with pytest.raises(UnknownProductError):
        Cart([EGUSI]).increment(99)


@pytest.mark.parametrize(
    "value,expected",
    [(2500, "2,500"), (12.5, "12.5"), (1000000, "1,000,000"), (150.505, "150.51"), (0, "0"), (99.999, "100")],
)
def test_format_amount(value, expected):
    assert format_amount(value) == expected


def test_items_summary_has_bullets_and_total_line():
    cart = Cart([EGUSI, ZOBO])
    cart.increment(EGUSI.id)
    cart.increment(EGUSI.id)
    cart.increment(ZOBO.id)

    summary = build_items_summary(cart.lines(), "₦")

    assert summary.splitlines() == [
        "• 2x Egusi Soup — ₦2,000",
        "• 1x Zobo — ₦500",
        "Total: ₦2,500",
    ]


def test_checkout_requires_items():
    session = StorefrontSession(_storefront(), opener=lambda url: None)

    with pytest.raises(CheckoutError):
        session.open_checkout()
    assert session.state is CheckoutState.BROWSING


def test_submit_requires_name_and_phone():
    session = StorefrontSession(_storefront(), opener=lambda url: None)
    session.increment(EGUSI.id)
    session.open_checkout()

    with pytest.raises(CheckoutError):
        session.submit(CustomerDetails(name=" ", phone="0801"))
    assert session.state is CheckoutState.REVIEWING
    assert session.total() == 1000


def test_submit_opens_deep_link_logs_order_and_clears_cart():
    opened = []
    order_logger = _RecordingLogger()
    session = StorefrontSession(_storefront(), order_logger=order_logger, opener=opened.append)
    session.increment(EGUSI.id)
    session.increment(EGUSI.id)
    session.increment(ZOBO.id)
    session.open_checkout()

    result = session.submit(CustomerDetails(name="Ada", phone="08011112222", note="12 Allen Avenue"))

    assert result.total == 2500
    assert result.message == "\n".join(
        [
            "*New Order for Mama Cass Kitchen*",
            "Customer: Ada (08011112222)",
            "Address: 12 Allen Avenue",
            "----------------",
            "• 2x Egusi Soup — ₦2,000",
            "• 1x Zobo — ₦500",
            "----------------",
            "*Total Amount: ₦2,500*",
            "",
            "*Delivery Details:*",
            "12 Allen Avenue",
            "",
            "_Sent via WhatsOrder_",
        ]
    )
    assert opened == [result.link]
    assert result.link.startswith("https://wa.me/2348012345678?text=")
    assert unquote(result.link.split("?text=", 1)[1]) == result.message

    assert len(order_logger.entries) == 1
    entry = order_logger.entries[0]
    assert entry.business_id == 7
    assert entry.total_price == 2500
    assert entry.customer_note == "12 Allen Avenue"
    assert entry.items_summary.endswith("Total: ₦2,500")

    assert session.cart.is_empty()
    assert session.state is CheckoutState.BROWSING


def test_message_uses_placeholder_without_note():
    session = StorefrontSession(_storefront(), opener=lambda url: None)
    session.increment(ZOBO.id)
    session.open_checkout()

    result = session.submit(CustomerDetails(name="Ada", phone="08011112222"))

    assert "Address: N/A" in result.message
    assert "*Delivery Details:*\nN/A" in result.message


def test_submit_without_open_checkout_is_rejected():
    session = StorefrontSession(_storefront(), opener=lambda url: None)
    session.increment(ZOBO.id)

    with pytest.raises(CheckoutError):
        session.submit(CustomerDetails(name="Ada", phone="08011112222"))


def test_grouped_products_lists_categories_then_all_products():
    groups = _storefront().grouped_products()

    assert [(group.title, [product.id for product in group.products]) for group in groups] == [
        ("Soups", [1, 3]),
        ("All Products", [2]),
    ]
