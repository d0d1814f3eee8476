"""
Store location endpoints.

Locations trigger a "bring your bags" reminder when the user comes within
reminder_radius meters, while is_active is set.
"""

from fastapi import APIRouter, Depends, status

from shared.models import AuthenticatedUser
from modules.storage.interfaces import IStorageService
from modules.storage.models import CreateLocationRequest, Location
from ..dependencies import get_storage_service
from ..errors import translate_errors
from ..middleware.auth import get_current_user

router = APIRouter()


@router.post("/locations", response_model=Location, status_code=status.HTTP_201_CREATED)
async def create_location(
    request: CreateLocationRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    storage: IStorageService = Depends(get_storage_service),
) -> Location:
    with translate_errors("create location"):
        return await storage.create_location(user.id, request)


@router.get("/locations", response_model=list[Location])
async def list_locations(
    user: AuthenticatedUser = Depends(get_current_user),
    storage: IStorageService = Depends(get_storage_service),
) -> list[Location]:
    with translate_errors("fetch locations"):
        return await storage.list_locations(user.id)


@router.patch("/locations/{location_id}/toggle", response_model=Location)
async def toggle_location(
    location_id: int,
    user: AuthenticatedUser = Depends(get_current_user),
    storage: IStorageService = Depends(get_storage_service),
) -> Location:
    """Turn the location's reminder on or off."""
    with translate_errors("update location"):
        return await storage.toggle_location_active(user.id, location_id)


@router.delete("/locations/{location_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_location(
    location_id: int,
    user: AuthenticatedUser = Depends(get_current_user),
    storage: IStorageService = Depends(get_storage_service),
) -> None:
    with translate_errors("delete location"):
        await storage.delete_location(user.id, location_id)
