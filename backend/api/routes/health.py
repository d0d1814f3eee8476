"""
Health check endpoints.

Provides endpoints for monitoring application health and readiness.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from shared.config import Settings
from modules.storage.interfaces import IStorageService
from modules.billing.interfaces import IBillingService
from ..dependencies import get_app_settings, get_billing_service, get_storage_service

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str


class ReadinessResponse(BaseModel):
    """Readiness check response model."""

    status: str
    database: str
    payments: str


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: Settings = Depends(get_app_settings)) -> HealthResponse:
    """
    Basic health check endpoint.

    Returns 200 if the API is running.
    """
    return HealthResponse(status="healthy", version=settings.app_version)


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check(
    storage: IStorageService = Depends(get_storage_service),
    billing: IBillingService = Depends(get_billing_service),
):
    """
    Readiness check endpoint.

    Pings the database; returns 503 when it cannot be reached. Missing
    Stripe credentials are reported but do not make the API unready.
    """
    payments = "configured" if billing.configured else "not_configured"
    try:
        await storage.ping()
    except Exception:
        logger.exception("Readiness check failed: database unreachable")
        body = ReadinessResponse(status="unavailable", database="unreachable", payments=payments)
        return JSONResponse(status_code=503, content=body.model_dump())

    return ReadinessResponse(status="ready", database="connected", payments=payments)
