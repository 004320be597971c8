from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from whatsorder.deps import get_catalog_service, get_owner_id
from whatsorder.schemas.business import (
    BusinessCreate,
    BusinessOut,
    BusinessUpdatePayload,
    PublicCatalogOut,
    SlugSuggestionOut,
    business_to_dict,
    public_business_to_dict,
)
from whatsorder.schemas.catalog import category_to_dict, product_to_dict, service_to_dict
from whatsorder.services.catalog import CatalogService

router = APIRouter(prefix="/api/businesses", tags=["businesses"])


@router.post("", response_model=BusinessOut, status_code=status.HTTP_201_CREATED)
def create_business(
    payload: BusinessCreate,
    owner_id: str = Depends(get_owner_id),
    service: CatalogService = Depends(get_catalog_service),
):
    business = service.create_business(owner_id, payload.to_draft())
    return business_to_dict(business)


@router.put("", response_model=BusinessOut)
def update_business(
    payload: BusinessUpdatePayload,
    owner_id: str = Depends(get_owner_id),
    service: CatalogService = Depends(get_catalog_service),
):
    business = service.update_own_business(owner_id, payload.to_update())
    return business_to_dict(business)


# Registered before /{slug} so these paths are never read as slugs.
@router.get("/me", response_model=BusinessOut)
def get_my_business(
    owner_id: str = Depends(get_owner_id),
    service: CatalogService = Depends(get_catalog_service),
):
    return business_to_dict(service.get_own_business(owner_id))


@router.get("/slug-suggestion", response_model=SlugSuggestionOut)
def suggest_slug(
    name: str = Query(..., max_length=200),
    service: CatalogService = Depends(get_catalog_service),
):
    slug, available = service.suggest_slug(name)
    return {"slug": slug, "available": available}


@router.get("/{slug}", response_model=PublicCatalogOut)
def get_public_catalog(
    slug: str,
    service: CatalogService = Depends(get_catalog_service),
):
    snapshot = service.get_public_catalog(slug)
    return {
        "business": public_business_to_dict(snapshot.business),
        "products": [product_to_dict(product) for product in snapshot.products],
        "services": [service_to_dict(item) for item in snapshot.services],
        "categories": [category_to_dict(category) for category in snapshot.categories],
    }
