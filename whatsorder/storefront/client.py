from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from whatsorder.storefront.cart import CartProduct

logger = logging.getLogger(__name__)

ALL_PRODUCTS_LABEL = "All Products"


class StorefrontNotFound(Exception):
    pass


@dataclass(frozen=True)
class StorefrontBusiness:
    id: int
    name: str
    slug: str
    whatsapp_number: str
    currency_symbol: str
    description: str | None = None
    logo_url: str | None = None


@dataclass(frozen=True)
class StorefrontService:
    id: int
    name: str
    starting_price: float


@dataclass(frozen=True)
class StorefrontCategory:
    id: int
    name: str


@dataclass(frozen=True)
class CatalogGroup:
    title: str
    products: list[CartProduct]


@dataclass(frozen=True)
class Storefront:
    business: StorefrontBusiness
    products: list[CartProduct]
    services: list[StorefrontService] = field(default_factory=list)
    categories: list[StorefrontCategory] = field(default_factory=list)

    def grouped_products(self) -> list[CatalogGroup]:
        """Categories holding at least one product, then uncategorized products."""
        groups: list[CatalogGroup] = []
        known_ids = {category.id for category in self.categories}
        for category in self.categories:
            products = [product for product in self.products if product.category_id == category.id]
            if products:
                groups.append(CatalogGroup(title=category.name, products=products))
        loose = [product for product in self.products if product.category_id not in known_ids]
        if loose:
            groups.append(CatalogGroup(title=ALL_PRODUCTS_LABEL, products=loose))
        return groups


def _parse_storefront(payload: dict[str, Any]) -> Storefront:
    business = payload.get("business") or {}
    return Storefront(
        business=StorefrontBusiness(
            id=int(business["id"]),
            name=business["name"],
            slug=business["slug"],
            whatsapp_number=business["whatsapp_number"],
            currency_symbol=business.get("currency_symbol") or "",
            description=business.get("description"),
            logo_url=business.get("logo_url"),
        ),
        products=[
            CartProduct(
                id=int(item["id"]),
                name=item["name"],
                price=float(item["price"]),
                category_id=item.get("category_id"),
                image_url=item.get("image_url"),
            )
            for item in payload.get("products") or []
        ],
        services=[
            StorefrontService(id=int(item["id"]), name=item["name"], starting_price=float(item["starting_price"]))
            for item in payload.get("services") or []
        ],
        categories=[
            StorefrontCategory(id=int(item["id"]), name=item["name"])
            for item in payload.get("categories") or []
        ],
    )


class StorefrontClient:
    """Talks to the public catalog API on behalf of a storefront visitor."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(base_url=self.base_url, timeout=timeout_seconds, transport=transport)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "StorefrontClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def load_storefront(self, slug: str) -> Storefront:
        response = self._client.get(f"/api/businesses/{slug}")
        if response.status_code == 404:
            raise StorefrontNotFound(slug)
        response.raise_for_status()
        return _parse_storefront(response.json())

    def post_order(self, payload: dict[str, Any]) -> httpx.Response:
        return self._client.post("/api/orders", json=payload)
