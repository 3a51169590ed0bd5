"""Health check endpoint.

Returns service status including store connectivity and the configured
storage backend.
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends
from starlette.responses import JSONResponse

from marketplace.core.config import settings
from marketplace.db.base import MarketplaceStore
from marketplace.db.store import get_store

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
def health_check(store: MarketplaceStore = Depends(get_store)) -> Any:
    """Return 200 OK when the store answers, 503 otherwise."""
    db_status = "disconnected"

    try:
        if store.ping():
            db_status = "connected"
    except Exception:
        logger.warning("Health check: store connection failed", exc_info=True)

    payload: dict[str, str] = {
        "status": "ok" if db_status == "connected" else "degraded",
        "database": db_status,
        "backend": settings.STORE_BACKEND,
    }

    if db_status != "connected":
        return JSONResponse(status_code=503, content=payload)

    return payload
