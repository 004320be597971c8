"""Tenant-scoped catalog operations.

Every owner-facing call first resolves the caller's business by owner id and
then acts only on rows carrying that business id. Lookups that miss, whether
the row is absent or belongs to another tenant, surface as ``NotFoundError``.
"""
from __future__ import annotations

import logging
from typing import Callable

from whatsorder.core import config
from whatsorder.core.errors import (
    ConflictError,
    InvalidInputError,
    LimitExceededError,
    NotFoundError,
)
from whatsorder.core.request_context import set_request_context
from whatsorder.store.base import CatalogStore
from whatsorder.store.records import (
    BusinessDraft,
    BusinessRecord,
    BusinessUpdate,
    CatalogSnapshot,
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
from whatsorder.utils.slug import SLUG_MAX_LENGTH, normalize_slug

logger = logging.getLogger(__name__)
CATALOG_PREFIX = "[CATALOG]"
ORDER_PREFIX = "[ORDER_LOG]"

NO_BUSINESS_MESSAGE = "Business not found"
DEFAULT_SUGGESTED_SLUG = "my-store"
MAX_SLUG_SUFFIX_ATTEMPTS = 50


class CatalogService:
    def __init__(
        self,
        store: CatalogStore,
        *,
        max_products: int | None = None,
        max_services: int | None = None,
        default_plan: str | None = None,
        currency_symbol: str | None = None,
        on_business: Callable[[BusinessRecord], None] | None = None,
    ) -> None:
        self.store = store
        self.on_business = on_business
        self.max_products = config.MAX_PRODUCTS_PER_BUSINESS if max_products is None else max_products
        self.max_services = config.MAX_SERVICES_PER_BUSINESS if max_services is None else max_services
        self.default_plan = default_plan or config.DEFAULT_PLAN
        self.currency_symbol = currency_symbol or config.DEFAULT_CURRENCY_SYMBOL

    def _bind_business(self, business: BusinessRecord) -> None:
        set_request_context(business_id=str(business.id))
        if self.on_business is not None:
            self.on_business(business)

    def _require_business(self, owner_id: str) -> BusinessRecord:
        business = self.store.get_business_by_owner(owner_id)
        if not business:
            raise NotFoundError(NO_BUSINESS_MESSAGE)
        self._bind_business(business)
        return business

    # Businesses

    def create_business(self, owner_id: str, draft: BusinessDraft) -> BusinessRecord:
        if self.store.get_business_by_owner(owner_id):
            raise ConflictError("You already have a business")
        if self.store.slug_exists(draft.slug):
            raise ConflictError("This link is already taken")
        business = self.store.insert_business(
            owner_id,
            draft,
            plan=self.default_plan,
            currency_symbol=self.currency_symbol,
        )
        self._bind_business(business)
        logger.info("%s business created id=%s slug=%s", CATALOG_PREFIX, business.id, business.slug)
        return business

    def get_own_business(self, owner_id: str) -> BusinessRecord:
        return self._require_business(owner_id)

    def update_own_business(self, owner_id: str, update: BusinessUpdate) -> BusinessRecord:
        business = self._require_business(owner_id)
        updated = self.store.update_business(business.id, update)
        if not updated:
            raise NotFoundError(NO_BUSINESS_MESSAGE)
        logger.info("%s business updated id=%s", CATALOG_PREFIX, business.id)
        return updated

    def get_public_catalog(self, slug: str) -> CatalogSnapshot:
        business = self.store.get_business_by_slug((slug or "").strip())
        if not business:
            raise NotFoundError(NO_BUSINESS_MESSAGE)
        self._bind_business(business)
        return CatalogSnapshot(
            business=business,
            products=self.store.list_products(business.id),
            services=self.store.list_services(business.id),
            categories=self.store.list_categories(business.id),
        )

    def suggest_slug(self, name: str) -> tuple[str, bool]:
        """Slug derived from ``name``, with a numeric suffix when the base is taken.

        Returns the candidate and whether it is free. The flag is only False when
        every suffixed attempt is taken as well.
        """
        base = normalize_slug(name) or DEFAULT_SUGGESTED_SLUG
        if not self.store.slug_exists(base):
            return base, True
        for attempt in range(2, MAX_SLUG_SUFFIX_ATTEMPTS + 2):
            suffix = f"-{attempt}"
            candidate = f"{base[: SLUG_MAX_LENGTH - len(suffix)].rstrip('-')}{suffix}"
            if not self.store.slug_exists(candidate):
                return candidate, True
        return base, False

    # Categories

    def list_categories(self, owner_id: str) -> list[CategoryRecord]:
        business = self.store.get_business_by_owner(owner_id)
        if not business:
            return []
        return self.store.list_categories(business.id)

    def create_category(self, owner_id: str, draft: CategoryDraft) -> CategoryRecord:
        business = self._require_business(owner_id)
        category = self.store.insert_category(business.id, draft)
        logger.info("%s category created id=%s business_id=%s", CATALOG_PREFIX, category.id, business.id)
        return category

    def delete_category(self, owner_id: str, category_id: int) -> None:
        business = self._require_business(owner_id)
        if self.store.delete_category(business.id, category_id):
            logger.info("%s category deleted id=%s business_id=%s", CATALOG_PREFIX, category_id, business.id)

    # Products

    def list_products(self, owner_id: str) -> list[ProductRecord]:
        business = self.store.get_business_by_owner(owner_id)
        if not business:
            return []
        return self.store.list_products(business.id)

    def _check_category(self, business: BusinessRecord, category_id: int | None) -> None:
        if category_id is None:
            return
        if not self.store.get_category(business.id, category_id):
            raise InvalidInputError("Category not found for this business")

    def create_product(self, owner_id: str, draft: ProductDraft) -> ProductRecord:
        business = self._require_business(owner_id)
        if self.store.count_products(business.id) >= self.max_products:
            logger.info("%s product cap reached business_id=%s", CATALOG_PREFIX, business.id)
            raise LimitExceededError(f"Product limit reached ({self.max_products})")
        self._check_category(business, draft.category_id)
        product = self.store.insert_product(business.id, draft)
        logger.info("%s product created id=%s business_id=%s", CATALOG_PREFIX, product.id, business.id)
        return product

    def update_product(self, owner_id: str, product_id: int, draft: ProductDraft) -> ProductRecord:
        business = self._require_business(owner_id)
        self._check_category(business, draft.category_id)
        product = self.store.update_product(business.id, product_id, draft)
        if not product:
            raise NotFoundError("Product not found")
        return product

    def delete_product(self, owner_id: str, product_id: int) -> None:
        business = self._require_business(owner_id)
        if not self.store.delete_product(business.id, product_id):
            raise NotFoundError("Product not found")
        logger.info("%s product deleted id=%s business_id=%s", CATALOG_PREFIX, product_id, business.id)

    # Services

    def list_services(self, owner_id: str) -> list[ServiceRecord]:
        business = self.store.get_business_by_owner(owner_id)
        if not business:
            return []
        return self.store.list_services(business.id)

    def create_service(self, owner_id: str, draft: ServiceDraft) -> ServiceRecord:
        business = self._require_business(owner_id)
        if self.store.count_services(business.id) >= self.max_services:
            logger.info("%s service cap reached business_id=%s", CATALOG_PREFIX, business.id)
            raise LimitExceededError(f"Service limit reached ({self.max_services})")
        service = self.store.insert_service(business.id, draft)
        logger.info("%s service created id=%s business_id=%s", CATALOG_PREFIX, service.id, business.id)
        return service

    def update_service(self, owner_id: str, service_id: int, draft: ServiceDraft) -> ServiceRecord:
        business = self._require_business(owner_id)
        service = self.store.update_service(business.id, service_id, draft)
        if not service:
            raise NotFoundError("Service not found")
        return service

    def delete_service(self, owner_id: str, service_id: int) -> None:
        business = self._require_business(owner_id)
        if not self.store.delete_service(business.id, service_id):
            raise NotFoundError("Service not found")
        logger.info("%s service deleted id=%s business_id=%s", CATALOG_PREFIX, service_id, business.id)

    # Orders

    def create_order(self, draft: OrderDraft) -> OrderRecord:
        # business_id is stored as sent; no existence check
        order = self.store.insert_order(draft)
        logger.info(
            "%s order logged id=%s business_id=%s total=%s",
            ORDER_PREFIX,
            order.id,
            order.business_id,
            order.total_price,
        )
        return order

    def list_own_orders(self, owner_id: str) -> list[OrderRecord]:
        business = self.store.get_business_by_owner(owner_id)
        if not business:
            return []
        return self.store.list_orders(business.id)

    # Profiles

    def get_profile(self, owner_id: str) -> ProfileRecord:
        return self.store.get_or_create_profile(owner_id)

    def complete_onboarding(self, owner_id: str) -> ProfileRecord:
        profile = self.store.set_onboarding_completed(owner_id, True)
        logger.info("%s onboarding completed owner_id=%s", CATALOG_PREFIX, owner_id)
        return profile
