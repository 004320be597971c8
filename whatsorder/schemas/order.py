from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from whatsorder.services.validation import PRICE_MAX, clean_optional_text
from whatsorder.store.records import OrderDraft, OrderRecord


class OrderCreate(BaseModel):
    """Public order log body. The business id is taken as given."""

    model_config = ConfigDict(populate_by_name=True)

    business_id: int = Field(..., alias="businessId")
    customer_note: Optional[str] = Field(default=None, alias="customerNote")
    total_price: float = Field(..., alias="totalPrice", ge=0, le=PRICE_MAX, allow_inf_nan=False)
    items_summary: str = Field(..., alias="itemsSummary")

    def to_draft(self) -> OrderDraft:
        return OrderDraft(
            business_id=self.business_id,
            customer_note=clean_optional_text(self.customer_note),
            total_price=float(self.total_price),
            items_summary=self.items_summary.strip(),
        )


class OrderOut(BaseModel):
    id: int
    business_id: int
    customer_note: Optional[str] = None
    total_price: float
    items_summary: str
    payment_status: Literal["pending", "paid", "failed"]
    created_at: Optional[str] = None


def order_to_dict(order: OrderRecord) -> dict:
    return {
        "id": order.id,
        "business_id": order.business_id,
        "customer_note": order.customer_note,
        "total_price": order.total_price,
        "items_summary": order.items_summary,
        "payment_status": order.payment_status,
        "created_at": order.created_at.isoformat() if order.created_at else None,
    }
