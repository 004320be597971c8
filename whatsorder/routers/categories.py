from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status

from whatsorder.deps import get_catalog_service, get_owner_id
from whatsorder.schemas.catalog import CategoryCreate, CategoryOut, category_to_dict
from whatsorder.services.catalog import CatalogService

router = APIRouter(prefix="/api/categories", tags=["categories"])


@router.get("", response_model=List[CategoryOut])
def list_categories(
    owner_id: str = Depends(get_owner_id),
    service: CatalogService = Depends(get_catalog_service),
):
    return [category_to_dict(category) for category in service.list_categories(owner_id)]


@router.post("", response_model=CategoryOut, status_code=status.HTTP_201_CREATED)
def create_category(
    payload: CategoryCreate,
    owner_id: str = Depends(get_owner_id),
    service: CatalogService = Depends(get_catalog_service),
):
    return category_to_dict(service.create_category(owner_id, payload.to_draft()))


@router.delete("/{category_id}")
def delete_category(
    category_id: int,
    owner_id: str = Depends(get_owner_id),
    service: CatalogService = Depends(get_catalog_service),
):
    service.delete_category(owner_id, category_id)
    return {"success": True}
