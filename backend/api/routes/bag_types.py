"""
Bag type endpoints.

A bag type is a kind of reusable bag the user owns, with the price of the
disposable bag it replaces.
"""

from fastapi import APIRouter, Depends, status

from shared.models import AuthenticatedUser
from modules.storage.interfaces import IStorageService
from modules.storage.models import BagType, CreateBagTypeRequest
from ..dependencies import get_storage_service
from ..errors import translate_errors
from ..middleware.auth import get_current_user

router = APIRouter()


@router.post("/bag-types", response_model=BagType, status_code=status.HTTP_201_CREATED)
async def create_bag_type(
    request: CreateBagTypeRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    storage: IStorageService = Depends(get_storage_service),
) -> BagType:
    """Create a bag type owned by the current user."""
    with translate_errors("create bag type"):
        return await storage.create_bag_type(user.id, request)


@router.get("/bag-types", response_model=list[BagType])
async def list_bag_types(
    user: AuthenticatedUser = Depends(get_current_user),
    storage: IStorageService = Depends(get_storage_service),
) -> list[BagType]:
    with translate_errors("fetch bag types"):
        return await storage.list_bag_types(user.id)


@router.delete("/bag-types/{bag_type_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_bag_type(
    bag_type_id: int,
    user: AuthenticatedUser = Depends(get_current_user),
    storage: IStorageService = Depends(get_storage_service),
) -> None:
    """Delete a bag type and the inventory rows that reference it."""
    with translate_errors("delete bag type"):
        await storage.delete_bag_type(user.id, bag_type_id)
