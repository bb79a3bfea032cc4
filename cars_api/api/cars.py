"""Car API endpoints. Every route requires an authenticated owner."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile, status

from cars_api.api.dependencies import get_car_service, get_logged_user
from cars_api.models.user import User
from cars_api.schemas.car import CarCreate, CarResponse, CarUpdate
from cars_api.services.car_service import CarService

router = APIRouter(prefix="/api/cars", tags=["cars"])


@router.post("", response_model=CarResponse, status_code=status.HTTP_201_CREATED)
def create_car(
    car_data: CarCreate,
    current_user: Annotated[User, Depends(get_logged_user)],
    service: Annotated[CarService, Depends(get_car_service)],
):
    """Create a car owned by the current user."""
    return service.create_car(car_data, current_user)


@router.get("", response_model=list[CarResponse])
def list_cars(
    current_user: Annotated[User, Depends(get_logged_user)],
    service: Annotated[CarService, Depends(get_car_service)],
):
    """Get all cars owned by the current user."""
    return service.list_cars(current_user)


@router.get("/{car_id}", response_model=CarResponse)
def get_car(
    car_id: int,
    current_user: Annotated[User, Depends(get_logged_user)],
    service: Annotated[CarService, Depends(get_car_service)],
):
    """Get a specific car. Each read increments its usage amount."""
    return service.get_car(car_id, current_user)


@router.put("/{car_id}", response_model=CarResponse)
def update_car(
    car_id: int,
    car_data: CarUpdate,
    current_user: Annotated[User, Depends(get_logged_user)],
    service: Annotated[CarService, Depends(get_car_service)],
):
    """Update a car."""
    return service.update_car(car_id, car_data, current_user)


@router.delete("/{car_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_car(
    car_id: int,
    current_user: Annotated[User, Depends(get_logged_user)],
    service: Annotated[CarService, Depends(get_car_service)],
):
    """Delete a car."""
    service.delete_car(car_id, current_user)


@router.post("/{car_id}/upload-photo", response_model=CarResponse)
async def upload_car_photo(
    car_id: int,
    file: Annotated[UploadFile, File(description="Car photo (JPEG or PNG)")],
    current_user: Annotated[User, Depends(get_logged_user)],
    service: Annotated[CarService, Depends(get_car_service)],
):
    """Upload a photo for a car.

    Note: This endpoint must remain async because UploadFile.read() is async.
    """
    content = await file.read()
    return service.upload_car_photo(car_id, file.filename, content, current_user)
