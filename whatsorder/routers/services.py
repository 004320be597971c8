from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status

from whatsorder.deps import get_catalog_service, get_owner_id
from whatsorder.schemas.catalog import ServiceOut, ServicePayload, service_to_dict
from whatsorder.services.catalog import CatalogService

router = APIRouter(prefix="/api/services", tags=["services"])


@router.get("", response_model=List[ServiceOut])
def list_services(
    owner_id: str = Depends(get_owner_id),
    catalog: CatalogService = Depends(get_catalog_service),
):
    return [service_to_dict(item) for item in catalog.list_services(owner_id)]


@router.post("", response_model=ServiceOut, status_code=status.HTTP_201_CREATED)
def create_service(
    payload: ServicePayload,
    owner_id: str = Depends(get_owner_id),
    catalog: CatalogService = Depends(get_catalog_service),
):
    return service_to_dict(catalog.create_service(owner_id, payload.to_draft()))


@router.put("/{service_id}", response_model=ServiceOut)
def update_service(
    service_id: int,
    payload: ServicePayload,
    owner_id: str = Depends(get_owner_id),
    catalog: CatalogService = Depends(get_catalog_service),
):
    return service_to_dict(catalog.update_service(owner_id, service_id, payload.to_draft()))


@router.delete("/{service_id}")
def delete_service(
    service_id: int,
    owner_id: str = Depends(get_owner_id),
    catalog: CatalogService = Depends(get_catalog_service),
):
    catalog.delete_service(owner_id, service_id)
    return {"success": True}
