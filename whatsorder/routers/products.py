from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status

from whatsorder.deps import get_catalog_service, get_owner_id
from whatsorder.schemas.catalog import ProductOut, ProductPayload, product_to_dict
from whatsorder.services.catalog import CatalogService

router = APIRouter(prefix="/api/products", tags=["products"])


@router.get("", response_model=List[ProductOut])
def list_products(
    owner_id: str = Depends(get_owner_id),
    service: CatalogService = Depends(get_catalog_service),
):
    return [product_to_dict(product) for product in service.list_products(owner_id)]


@router.post("", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
def create_product(
    payload: ProductPayload,
    owner_id: str = Depends(get_owner_id),
    service: CatalogService = Depends(get_catalog_service),
):
    return product_to_dict(service.create_product(owner_id, payload.to_draft()))


@router.put("/{product_id}", response_model=ProductOut)
def update_product(
    product_id: int,
    payload: ProductPayload,
    owner_id: str = Depends(get_owner_id),
    service: CatalogService = Depends(get_catalog_service),
):
    return product_to_dict(service.update_product(owner_id, product_id, payload.to_draft()))


@router.delete("/{product_id}")
def delete_product(
    product_id: int,
    owner_id: str = Depends(get_owner_id),
    service: CatalogService = Depends(get_catalog_service),
):
    service.delete_product(owner_id, product_id)
    return {"success": True}
