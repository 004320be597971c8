from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from itertools import count
from threading import RLock
from typing import Iterable, TypeVar

from whatsorder.core.errors import ConflictError
from whatsorder.store.base import CatalogStore
from whatsorder.store.records import (
    BusinessDraft,
    BusinessRecord,
    BusinessUpdate,
    CategoryDraft,
    CategoryRecord,
    OrderDraft,
    OrderRecord,
    ProductDraft,
    ProductRecord,
    ProfileRecord,
    ServiceDraft,
    ServiceRecord,
)

T = TypeVar("T", ProductRecord, ServiceRecord, OrderRecord)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _newest_first(rows: Iterable[T]) -> list[T]:
    return sorted(rows, key=lambda row: (row.created_at, row.id), reverse=True)


class InMemoryCatalogStore(CatalogStore):
    """Process-local adapter; a single lock serializes every read and write."""

    def __init__(self) -> None:
        self._lock = RLock()
        self._ids = {name: count(1) for name in ("business", "category", "product", "service", "order")}
        self._businesses: dict[int, BusinessRecord] = {}
        self._categories: dict[int, CategoryRecord] = {}
        self._products: dict[int, ProductRecord] = {}
        self._services: dict[int, ServiceRecord] = {}
        self._orders: dict[int, OrderRecord] = {}
        self._profiles: dict[str, ProfileRecord] = {}

    def _next_id(self, name: str) -> int:
        return next(self._ids[name])

    # Businesses

    def get_business_by_owner(self, owner_id: str) -> BusinessRecord | None:
        with self._lock:
            return next((b for b in self._businesses.values() if b.owner_id == owner_id), None)

    def get_business_by_slug(self, slug: str) -> BusinessRecord | None:
        with self._lock:
            return next((b for b in self._businesses.values() if b.slug == slug), None)

    def slug_exists(self, slug: str) -> bool:
        return self.get_business_by_slug(slug) is not None

    def insert_business(
        self,
        owner_id: str,
        draft: BusinessDraft,
        *,
        plan: str,
        currency_symbol: str,
    ) -> BusinessRecord:
        with self._lock:
            if self.get_business_by_owner(owner_id) or self.slug_exists(draft.slug):
                raise ConflictError("Business already exists or this link is already taken")
            now = _now()
            record = BusinessRecord(
                id=self._next_id("business"),
                owner_id=owner_id,
                name=draft.name,
                slug=draft.slug,
                whatsapp_number=draft.whatsapp_number,
                description=draft.description,
                logo_url=draft.logo_url,
                currency_symbol=currency_symbol,
                plan=plan,
                created_at=now,
                updated_at=now,
            )
            self._businesses[record.id] = record
            return record

    def update_business(self, business_id: int, update: BusinessUpdate) -> BusinessRecord | None:
        with self._lock:
            current = self._businesses.get(business_id)
            if not current:
                return None
            record = replace(
                current,
                name=update.name,
                whatsapp_number=update.whatsapp_number,
                description=update.description,
                logo_url=update.logo_url,
                updated_at=_now(),
            )
            self._businesses[business_id] = record
            return record

    # Categories

    def list_categories(self, business_id: int) -> list[CategoryRecord]:
        with self._lock:
            rows = [c for c in self._categories.values() if c.business_id == business_id]
        return sorted(rows, key=lambda row: (row.name, row.id))

    def get_category(self, business_id: int, category_id: int) -> CategoryRecord | None:
        with self._lock:
            category = self._categories.get(category_id)
        if category and category.business_id == business_id:
            return category
        return None

    def insert_category(self, business_id: int, draft: CategoryDraft) -> CategoryRecord:
        with self._lock:
            record = CategoryRecord(
                id=self._next_id("category"),
                business_id=business_id,
                name=draft.name,
                created_at=_now(),
            )
            self._categories[record.id] = record
            return record

    def delete_category(self, business_id: int, category_id: int) -> bool:
        with self._lock:
            if not self.get_category(business_id, category_id):
                return False
            del self._categories[category_id]
            for product_id, product in list(self._products.items()):
                if product.business_id == business_id and product.category_id == category_id:
                    self._products[product_id] = replace(product, category_id=None)
            return True

    # Products

    def list_products(self, business_id: int) -> list[ProductRecord]:
        with self._lock:
            return _newest_first(p for p in self._products.values() if p.business_id == business_id)

    def count_products(self, business_id: int) -> int:
        with self._lock:
            return sum(1 for p in self._products.values() if p.business_id == business_id)

    def insert_product(self, business_id: int, draft: ProductDraft) -> ProductRecord:
        with self._lock:
            now = _now()
            record = ProductRecord(
                id=self._next_id("product"),
                business_id=business_id,
                category_id=draft.category_id,
                name=draft.name,
                price=draft.price,
                image_url=draft.image_url,
                created_at=now,
                updated_at=now,
            )
            self._products[record.id] = record
            return record

    def update_product(self, business_id: int, product_id: int, draft: ProductDraft) -> ProductRecord | None:
        with self._lock:
            current = self._products.get(product_id)
            if not current or current.business_id != business_id:
                return None
            record = replace(
                current,
                name=draft.name,
                price=draft.price,
                category_id=draft.category_id,
                image_url=draft.image_url,
                updated_at=_now(),
            )
            self._products[product_id] = record
            return record

    def delete_product(self, business_id: int, product_id: int) -> bool:
        with self._lock:
            current = self._products.get(product_id)
            if not current or current.business_id != business_id:
                return False
            del self._products[product_id]
            return True

    # Services

    def list_services(self, business_id: int) -> list[ServiceRecord]:
        with self._lock:
            return _newest_first(s for s in self._services.values() if s.business_id == business_id)

    def count_services(self, business_id: int) -> int:
        with self._lock:
            return sum(1 for s in self._services.values() if s.business_id == business_id)

    def insert_service(self, business_id: int, draft: ServiceDraft) -> ServiceRecord:
        with self._lock:
            now = _now()
            record = ServiceRecord(
                id=self._next_id("service"),
                business_id=business_id,
                name=draft.name,
                starting_price=draft.starting_price,
                created_at=now,
                updated_at=now,
            )
            self._services[record.id] = record
            return record

    def update_service(self, business_id: int, service_id: int, draft: ServiceDraft) -> ServiceRecord | None:
        with self._lock:
            current = self._services.get(service_id)
            if not current or current.business_id != business_id:
                return None
            record = replace(current, name=draft.name, starting_price=draft.starting_price, updated_at=_now())
            self._services[service_id] = record
            return record

    def delete_service(self, business_id: int, service_id: int) -> bool:
        with self._lock:
            current = self._services.get(service_id)
            if not current or current.business_id != business_id:
                return False
            del self._services[service_id]
            return True

    # Orders

    def insert_order(self, draft: OrderDraft) -> OrderRecord:
        with self._lock:
            record = OrderRecord(
                id=self._next_id("order"),
                business_id=draft.business_id,
                customer_note=draft.customer_note,
                total_price=draft.total_price,
                items_summary=draft.items_summary,
                payment_status="pending",
                created_at=_now(),
            )
            self._orders[record.id] = record
            return record

    def list_orders(self, business_id: int) -> list[OrderRecord]:
        with self._lock:
            return _newest_first(o for o in self._orders.values() if o.business_id == business_id)

    # Profiles

    def get_or_create_profile(self, owner_id: str) -> ProfileRecord:
        with self._lock:
            profile = self._profiles.get(owner_id)
            if profile is None:
                now = _now()
                profile = ProfileRecord(owner_id=owner_id, onboarding_completed=False, created_at=now, updated_at=now)
                self._profiles[owner_id] = profile
            return profile

    def set_onboarding_completed(self, owner_id: str, completed: bool = True) -> ProfileRecord:
        with self._lock:
            profile = replace(self.get_or_create_profile(owner_id), onboarding_completed=completed, updated_at=_now())
            self._profiles[owner_id] = profile
            return profile


memory_store = InMemoryCatalogStore()
