from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from whatsorder.schemas.catalog import CategoryOut, ProductOut, ServiceOut
from whatsorder.services import validation
from whatsorder.store.records import BusinessDraft, BusinessRecord, BusinessUpdate


class BusinessCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    slug: str
    whatsapp_number: str = Field(..., alias="whatsappNumber")
    description: Optional[str] = None
    logo_url: Optional[str] = Field(default=None, alias="logoUrl")

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        return validation.clean_business_name(value)

    @field_validator("slug")
    @classmethod
    def validate_slug(cls, value: str) -> str:
        return validation.clean_slug(value)

    @field_validator("whatsapp_number")
    @classmethod
    def validate_whatsapp(cls, value: str) -> str:
        return validation.clean_whatsapp_number(value)

    @field_validator("description", "logo_url")
    @classmethod
    def validate_optional(cls, value: Optional[str]) -> Optional[str]:
        return validation.clean_optional_text(value)

    def to_draft(self) -> BusinessDraft:
        return BusinessDraft(
            name=self.name,
            slug=self.slug,
            whatsapp_number=self.whatsapp_number,
            description=self.description,
            logo_url=self.logo_url,
        )


class BusinessUpdatePayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    whatsapp_number: str = Field(..., alias="whatsappNumber")
    description: Optional[str] = None
    logo_url: Optional[str] = Field(default=None, alias="logoUrl")

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        return validation.clean_business_name(value)

    @field_validator("whatsapp_number")
    @classmethod
    def validate_whatsapp(cls, value: str) -> str:
        return validation.clean_whatsapp_number(value)

    @field_validator("description", "logo_url")
    @classmethod
    def validate_optional(cls, value: Optional[str]) -> Optional[str]:
        return validation.clean_optional_text(value)

    def to_update(self) -> BusinessUpdate:
        return BusinessUpdate(
            name=self.name,
            whatsapp_number=self.whatsapp_number,
            description=self.description,
            logo_url=self.logo_url,
        )


class PublicBusinessOut(BaseModel):
    id: int
    name: str
    slug: str
    description: Optional[str] = None
    logo_url: Optional[str] = None
    whatsapp_number: str
    currency_symbol: str


class BusinessOut(PublicBusinessOut):
    owner_id: str
    plan: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class PublicCatalogOut(BaseModel):
    business: PublicBusinessOut
    products: list[ProductOut]
    services: list[ServiceOut]
    categories: list[CategoryOut]


class SlugSuggestionOut(BaseModel):
    slug: str
    available: bool


def public_business_to_dict(business: BusinessRecord) -> dict:
    return {
        "id": business.id,
        "name": business.name,
        "slug": business.slug,
        "description": business.description,
        "logo_url": business.logo_url,
        "whatsapp_number": business.whatsapp_number,
        "currency_symbol": business.currency_symbol,
    }


def business_to_dict(business: BusinessRecord) -> dict:
    return {
        **public_business_to_dict(business),
        "owner_id": business.owner_id,
        "plan": business.plan,
        "created_at": business.created_at.isoformat() if business.created_at else None,
        "updated_at": business.updated_at.isoformat() if business.updated_at else None,
    }
