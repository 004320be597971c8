from __future__ import annotations

from dataclasses import dataclass
from threading import Lock
from typing import Iterable


@dataclass(frozen=True)
class CartProduct:
    id: int
    name: str
    price: float
    category_id: int | None = None
    image_url: str | None = None


@dataclass(frozen=True)
class CartLine:
    product: CartProduct
    quantity: int

    @property
    def subtotal(self) -> float:
        return self.product.price * self.quantity


class UnknownProductError(KeyError):
    pass


class Cart:
    """Quantities per product id for one storefront visit.

    Quantities never go below zero and are not checked against any stock.
    """

    def __init__(self, products: Iterable[CartProduct]) -> None:
        self._products = {product.id: product for product in products}
        self._quantities: dict[int, int] = {}
        self._lock = Lock()

    def _require(self, product_id: int) -> CartProduct:
        product = self._products.get(product_id)
        if product is None:
            raise UnknownProductError(product_id)
        return product

    def quantity(self, product_id: int) -> int:
        return self._quantities.get(product_id, 0)

    def increment(self, product_id: int) -> int:
        self._require(product_id)
        with self._lock:
            value = self._quantities.get(product_id, 0) + 1
            self._quantities[product_id] = value
            return value

    def decrement(self, product_id: int) -> int:
        self._require(product_id)
        with self._lock:
            value = max(0, self._quantities.get(product_id, 0) - 1)
            if value:
                self._quantities[product_id] = value
            else:
                self._quantities.pop(product_id, None)
            return value

    def lines(self) -> list[CartLine]:
        """Non-empty lines, in catalog order."""
        with self._lock:
            quantities = dict(self._quantities)
        return [
            CartLine(product=product, quantity=quantities[product_id])
            for product_id, product in self._products.items()
            if quantities.get(product_id, 0) > 0
        ]

    def total(self) -> float:
        return sum(line.subtotal for line in self.lines())

    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines())

    def is_empty(self) -> bool:
        return not self.lines()

    def clear(self) -> None:
        with self._lock:
            self._quantities.clear()
