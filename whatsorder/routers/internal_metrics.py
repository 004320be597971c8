from __future__ import annotations

from fastapi import APIRouter, Depends

from whatsorder.core.metrics import request_metrics
from whatsorder.deps import get_owner_id

router = APIRouter(prefix="/internal/metrics", tags=["internal-metrics"])


@router.get("")
def metrics_snapshot(_owner_id: str = Depends(get_owner_id)):
    return {
        "endpoints": request_metrics.snapshot(),
        "businesses": request_metrics.snapshot_per_business(),
    }
