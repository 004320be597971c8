from __future__ import annotations

from abc import ABC, abstractmethod

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


class CatalogStore(ABC):
    """Persistence adapter for the catalog.

    Every method touching tenant data takes the owning ``business_id`` and
    filters on it; a row owned by another business is indistinguishable from a
    missing one. Lists of products, services and orders come newest-first,
    categories alphabetically.
    """

    # Businesses

    @abstractmethod
    def get_business_by_owner(self, owner_id: str) -> BusinessRecord | None:
        ...

    @abstractmethod
    def get_business_by_slug(self, slug: str) -> BusinessRecord | None:
        ...

    @abstractmethod
    def slug_exists(self, slug: str) -> bool:
        ...

    @abstractmethod
    def insert_business(
        self,
        owner_id: str,
        draft: BusinessDraft,
        *,
        plan: str,
        currency_symbol: str,
    ) -> BusinessRecord:
        """Insert a business; raises ``ConflictError`` on owner or slug collision."""

    @abstractmethod
    def update_business(self, business_id: int, update: BusinessUpdate) -> BusinessRecord | None:
        ...

    # Categories

    @abstractmethod
    def list_categories(self, business_id: int) -> list[CategoryRecord]:
        ...

    @abstractmethod
    def get_category(self, business_id: int, category_id: int) -> CategoryRecord | None:
        ...

    @abstractmethod
    def insert_category(self, business_id: int, draft: CategoryDraft) -> CategoryRecord:
        ...

    @abstractmethod
    def delete_category(self, business_id: int, category_id: int) -> bool:
        """Delete the category and detach its products; False when nothing matched."""

    # Products

    @abstractmethod
    def list_products(self, business_id: int) -> list[ProductRecord]:
        ...

    @abstractmethod
    def count_products(self, business_id: int) -> int:
        ...

    @abstractmethod
    def insert_product(self, business_id: int, draft: ProductDraft) -> ProductRecord:
        ...

    @abstractmethod
    def update_product(self, business_id: int, product_id: int, draft: ProductDraft) -> ProductRecord | None:
        ...

    @abstractmethod
    def delete_product(self, business_id: int, product_id: int) -> bool:
        ...

    # Services

    @abstractmethod
    def list_services(self, business_id: int) -> list[ServiceRecord]:
        ...

    @abstractmethod
    def count_services(self, business_id: int) -> int:
        ...

    @abstractmethod
    def insert_service(self, business_id: int, draft: ServiceDraft) -> ServiceRecord:
        ...

    @abstractmethod
    def update_service(self, business_id: int, service_id: int, draft: ServiceDraft) -> ServiceRecord | None:
        ...

    @abstractmethod
    def delete_service(self, business_id: int, service_id: int) -> bool:
        ...

    # Orders

    @abstractmethod
    def insert_order(self, draft: OrderDraft) -> OrderRecord:
        ...

    @abstractmethod
    def list_orders(self, business_id: int) -> list[OrderRecord]:
        ...

    # Profiles

    @abstractmethod
    def get_or_create_profile(self, owner_id: str) -> ProfileRecord:
        ...

    @abstractmethod
    def set_onboarding_completed(self, owner_id: str, completed: bool = True) -> ProfileRecord:
        ...
