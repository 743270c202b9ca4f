from typing import Optional

from fastapi import APIRouter, Query
from services.logging_service import get_ring_handler


router = APIRouter(prefix="/logs", tags=["logs"])


@router.get("/recent")
def get_recent_logs(
    limit: int = Query(500, ge=1, le=5000),
    record_number: Optional[int] = Query(None, ge=1),
):
    ring = get_ring_handler()
    return {"logs": ring.get_recent(limit, record_number)}
