from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class BusinessRecord:
    id: int
    owner_id: str
    name: str
    slug: str
    whatsapp_number: str
    description: str | None
    logo_url: str | None
    currency_symbol: str
    plan: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class CategoryRecord:
    id: int
    business_id: int
    name: str
    created_at: datetime | None = None


@dataclass(frozen=True)
class ProductRecord:
    id: int
    business_id: int
    category_id: int | None
    name: str
    price: float
    image_url: str | None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class ServiceRecord:
    id: int
    business_id: int
    name: str
    starting_price: float
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class OrderRecord:
    id: int
    business_id: int
    customer_note: str | None
    total_price: float
    items_summary: str
    payment_status: str
    created_at: datetime | None = None


@dataclass(frozen=True)
class ProfileRecord:
    owner_id: str
    onboarding_completed: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


# Drafts are already validated by the schema layer before they reach a store.


@dataclass(frozen=True)
class BusinessDraft:
    name: str
    slug: str
    whatsapp_number: str
    description: str | None = None
    logo_url: str | None = None


@dataclass(frozen=True)
class BusinessUpdate:
    name: str
    whatsapp_number: str
    description: str | None = None
    logo_url: str | None = None


@dataclass(frozen=True)
class CategoryDraft:
    name: str


@dataclass(frozen=True)
class ProductDraft:
    name: str
    price: float
    category_id: int | None = None
    image_url: str | None = None


@dataclass(frozen=True)
class ServiceDraft:
    name: str
    starting_price: float


@dataclass(frozen=True)
class OrderDraft:
    business_id: int
    total_price: float
    items_summary: str
    customer_note: str | None = None


@dataclass(frozen=True)
class CatalogSnapshot:
    business: BusinessRecord
    products: list[ProductRecord]
    services: list[ServiceRecord]
    categories: list[CategoryRecord]
