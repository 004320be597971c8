from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Request, status

from whatsorder.deps import get_catalog_service, get_owner_id
from whatsorder.schemas.order import OrderCreate, OrderOut, order_to_dict
from whatsorder.services.catalog import CatalogService

router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.post("", response_model=OrderOut, status_code=status.HTTP_201_CREATED)
def log_order(
    payload: OrderCreate,
    request: Request,
    service: CatalogService = Depends(get_catalog_service),
):
    """Public: records a submitted cart. No credential is required."""
    request.state.business_id = payload.business_id
    return order_to_dict(service.create_order(payload.to_draft()))


@router.get("/me", response_model=List[OrderOut])
def list_my_orders(
    owner_id: str = Depends(get_owner_id),
    service: CatalogService = Depends(get_catalog_service),
):
    return [order_to_dict(order) for order in service.list_own_orders(owner_id)]
