"""FastAPI application entry point.

Configures CORS, structured logging, lifespan events, the domain error
handler, and router registration.
"""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse

from marketplace.core.config import settings
from marketplace.core.errors import MarketplaceError
from marketplace.core.logging import setup_logging
from marketplace.routers import bids, health, jobs, profiles, providers

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Application lifespan: startup and shutdown hooks."""
    setup_logging()
    logger.info("Application starting up", extra={"backend": settings.STORE_BACKEND})
    yield
    logger.info("Application shutting down")


app = FastAPI(
    title="Local Services Marketplace API",
    description="Jobs posted by customers, competing bids from providers",
    version="0.1.0",
    lifespan=lifespan,
)


# ---------------------------------------------------------------------------
# Domain errors -> HTTP
# ---------------------------------------------------------------------------
async def _marketplace_error_handler(request: Request, exc: MarketplaceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "request_failed",
            extra={"path": request.url.path, "code": exc.code, "error_message": exc.message},
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.code, "detail": exc.message},
    )


app.add_exception_handler(MarketplaceError, _marketplace_error_handler)

# ---------------------------------------------------------------------------
# CORS Configuration
# ---------------------------------------------------------------------------
_raw_origins = settings.ALLOWED_ORIGINS.strip()
if _raw_origins == "*":
    _allowed_origins: list[str] = ["*"]
else:
    _allowed_origins = [o.strip() for o in _raw_origins.split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Router Registration
# ---------------------------------------------------------------------------
app.include_router(health.router, tags=["Health"])
app.include_router(profiles.router, prefix="/api/v1", tags=["Profiles"])
app.include_router(jobs.router, prefix="/api/v1/jobs", tags=["Jobs"])
app.include_router(bids.router, prefix="/api/v1/bids", tags=["Bids"])
app.include_router(providers.router, prefix="/api/v1", tags=["Providers"])
