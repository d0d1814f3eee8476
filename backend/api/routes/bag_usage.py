"""
Bag usage and savings endpoints.

Recording usage stores what the user saved (computed from the bag type's
price) and takes the bags out of the car's inventory.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from shared.config import Settings
from shared.models import AuthenticatedUser
from modules.storage.interfaces import IStorageService
from modules.storage.models import BagUsage, RecordBagUsageRequest, SavingsSummary
from ..dependencies import get_app_settings, get_storage_service
from ..errors import translate_errors
from ..middleware.auth import get_current_user

router = APIRouter()


@router.post("/bag-usage", response_model=BagUsage, status_code=status.HTTP_201_CREATED)
async def record_bag_usage(
    request: RecordBagUsageRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    storage: IStorageService = Depends(get_storage_service),
) -> BagUsage:
    """
    Record bags used on a shopping trip.

    When car_id is given, the car's stock of that bag type is reduced by
    the quantity used, never below zero.
    """
    with translate_errors("record bag usage"):
        return await storage.record_bag_usage(user.id, request)


@router.get("/bag-usage", response_model=list[BagUsage])
async def list_bag_usage(
    limit: Optional[int] = Query(default=None, ge=1, le=100, description="Maximum records"),
    user: AuthenticatedUser = Depends(get_current_user),
    storage: IStorageService = Depends(get_storage_service),
    settings: Settings = Depends(get_app_settings),
) -> list[BagUsage]:
    """Most recent usage records first."""
    with translate_errors("fetch bag usage"):
        return await storage.list_bag_usage(user.id, limit or settings.bag_usage_default_limit)


@router.get("/savings", response_model=SavingsSummary)
async def get_savings(
    user: AuthenticatedUser = Depends(get_current_user),
    storage: IStorageService = Depends(get_storage_service),
) -> SavingsSummary:
    """Total money saved and bags used over all of the user's usage."""
    with translate_errors("fetch savings"):
        return await storage.get_user_savings(user.id)
