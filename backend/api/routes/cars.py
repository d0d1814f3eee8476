"""
Car and inventory endpoints.

Each car carries a stock of bags per bag type. Inventory rows are keyed
by (car, bag type); setting a row twice updates it.
"""

from fastapi import APIRouter, Depends, status

from shared.models import AuthenticatedUser
from modules.storage.interfaces import IStorageService
from modules.storage.models import (
    Car,
    CreateCarRequest,
    InventoryRow,
    SetInventoryRequest,
)
from ..dependencies import get_storage_service
from ..errors import translate_errors
from ..middleware.auth import get_current_user

router = APIRouter()


@router.post("/cars", response_model=Car, status_code=status.HTTP_201_CREATED)
async def create_car(
    request: CreateCarRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    storage: IStorageService = Depends(get_storage_service),
) -> Car:
    with translate_errors("create car"):
        return await storage.create_car(user.id, request)


@router.get("/cars", response_model=list[Car])
async def list_cars(
    user: AuthenticatedUser = Depends(get_current_user),
    storage: IStorageService = Depends(get_storage_service),
) -> list[Car]:
    """List the current user's cars, newest first."""
    with translate_errors("fetch cars"):
        return await storage.list_cars(user.id)


@router.delete("/cars/{car_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_car(
    car_id: int,
    user: AuthenticatedUser = Depends(get_current_user),
    storage: IStorageService = Depends(get_storage_service),
) -> None:
    """
    Delete a car.

    Its inventory goes with it; usage records made from the car are kept.
    """
    with translate_errors("delete car"):
        await storage.delete_car(user.id, car_id)


@router.get("/cars/{car_id}/inventory", response_model=list[InventoryRow])
async def get_car_inventory(
    car_id: int,
    user: AuthenticatedUser = Depends(get_current_user),
    storage: IStorageService = Depends(get_storage_service),
) -> list[InventoryRow]:
    with translate_errors("fetch car inventory"):
        return await storage.get_car_inventory(user.id, car_id)


@router.post("/cars/{car_id}/inventory", response_model=InventoryRow)
async def set_car_inventory(
    car_id: int,
    request: SetInventoryRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    storage: IStorageService = Depends(get_storage_service),
) -> InventoryRow:
    """Set how many bags of one type are in the car."""
    with translate_errors("set car inventory"):
        return await storage.set_car_inventory(
            user.id,
            car_id,
            request.bag_type_id,
            request.quantity,
            request.low_stock_threshold,
        )


@router.get("/inventory/low-stock", response_model=list[InventoryRow])
async def list_low_stock(
    user: AuthenticatedUser = Depends(get_current_user),
    storage: IStorageService = Depends(get_storage_service),
) -> list[InventoryRow]:
    """Inventory rows across all of the user's cars at or below their threshold."""
    with translate_errors("fetch low stock"):
        return await storage.list_low_stock(user.id)
