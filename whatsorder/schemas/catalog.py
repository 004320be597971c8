from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from whatsorder.services import validation
from whatsorder.store.records import (
    CategoryDraft,
    CategoryRecord,
    ProductDraft,
    ProductRecord,
    ServiceDraft,
    ServiceRecord,
)


class CategoryCreate(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        return validation.clean_item_name(value, label="Category name", max_length=None)

    def to_draft(self) -> CategoryDraft:
        return CategoryDraft(name=self.name)


class CategoryOut(BaseModel):
    id: int
    business_id: int
    name: str
    created_at: Optional[str] = None


class ProductPayload(BaseModel):
    """Body for product create and update; prices must be JSON numbers."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    price: float = Field(..., gt=0, le=validation.PRICE_MAX, strict=True, allow_inf_nan=False)
    category_id: Optional[int] = Field(default=None, alias="categoryId", strict=True)
    image_url: Optional[str] = Field(default=None, alias="imageUrl")

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        return validation.clean_item_name(value, label="Product name")

    @field_validator("price")
    @classmethod
    def validate_price(cls, value: float) -> float:
        return validation.clean_price(value)

    @field_validator("image_url")
    @classmethod
    def validate_image_url(cls, value: Optional[str]) -> Optional[str]:
        return validation.clean_optional_text(value)

    def to_draft(self) -> ProductDraft:
        return ProductDraft(
            name=self.name,
            price=float(self.price),
            category_id=self.category_id or None,
            image_url=self.image_url,
        )


class ProductOut(BaseModel):
    id: int
    business_id: int
    category_id: Optional[int] = None
    name: str
    price: float
    image_url: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ServicePayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    starting_price: float = Field(
        ..., alias="startingPrice", gt=0, le=validation.PRICE_MAX, strict=True, allow_inf_nan=False
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        return validation.clean_item_name(value, label="Service name")

    @field_validator("starting_price")
    @classmethod
    def validate_starting_price(cls, value: float) -> float:
        return validation.clean_price(value, label="Starting price")

    def to_draft(self) -> ServiceDraft:
        return ServiceDraft(name=self.name, starting_price=float(self.starting_price))


class ServiceOut(BaseModel):
    id: int
    business_id: int
    name: str
    starting_price: float
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


def category_to_dict(category: CategoryRecord) -> dict:
    return {
        "id": category.id,
        "business_id": category.business_id,
        "name": category.name,
        "created_at": category.created_at.isoformat() if category.created_at else None,
    }


def product_to_dict(product: ProductRecord) -> dict:
    return {
        "id": product.id,
        "business_id": product.business_id,
        "category_id": product.category_id,
        "name": product.name,
        "price": product.price,
        "image_url": product.image_url,
        "created_at": product.created_at.isoformat() if product.created_at else None,
        "updated_at": product.updated_at.isoformat() if product.updated_at else None,
    }


def service_to_dict(service: ServiceRecord) -> dict:
    return {
        "id": service.id,
        "business_id": service.business_id,
        "name": service.name,
        "starting_price": service.starting_price,
        "created_at": service.created_at.isoformat() if service.created_at else None,
        "updated_at": service.updated_at.isoformat() if service.updated_at else None,
    }
