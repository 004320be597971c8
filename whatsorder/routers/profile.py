from __future__ import annotations

from fastapi import APIRouter, Depends

from whatsorder.deps import get_catalog_service, get_owner_id
from whatsorder.schemas.profile import ProfileOut, profile_to_dict
from whatsorder.services.catalog import CatalogService

router = APIRouter(prefix="/api", tags=["profile"])


@router.get("/profile", response_model=ProfileOut)
def get_profile(
    owner_id: str = Depends(get_owner_id),
    service: CatalogService = Depends(get_catalog_service),
):
    return profile_to_dict(service.get_profile(owner_id))


@router.post("/onboarding/complete", response_model=ProfileOut)
def complete_onboarding(
    owner_id: str = Depends(get_owner_id),
    service: CatalogService = Depends(get_catalog_service),
):
    return profile_to_dict(service.complete_onboarding(owner_id))
