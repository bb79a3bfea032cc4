"""User API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile, status

from cars_api.api.dependencies import get_logged_user, get_user_service
from cars_api.models.user import User
from cars_api.schemas.car import CarResponse
from cars_api.schemas.user import UserCreate, UserResponse, UserUpdate
from cars_api.services.user_service import UserService, sort_cars_by_usage

router = APIRouter(prefix="/api/users", tags=["users"])


def build_user_response(user: User) -> UserResponse:
    """Build a user response with cars ordered by usage, most used first."""
    response = UserResponse.model_validate(user)
    response.cars = [CarResponse.model_validate(car) for car in sort_cars_by_usage(user.cars)]
    return response


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    user_data: UserCreate,
    service: Annotated[UserService, Depends(get_user_service)],
):
    """Register a new user. This route is public."""
    user = service.create_user(user_data)
    return build_user_response(user)


@router.get("", response_model=list[UserResponse])
def list_users(
    current_user: Annotated[User, Depends(get_logged_user)],
    service: Annotated[UserService, Depends(get_user_service)],
):
    """Get all active users."""
    return [build_user_response(user) for user in service.list_users()]


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: int,
    current_user: Annotated[User, Depends(get_logged_user)],
    service: Annotated[UserService, Depends(get_user_service)],
):
    """Get a specific active user."""
    return build_user_response(service.get_user(user_id))


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    user_data: UserUpdate,
    current_user: Annotated[User, Depends(get_logged_user)],
    service: Annotated[UserService, Depends(get_user_service)],
):
    """Update a user. A ``cars`` list replaces the user's owned cars."""
    user = service.update_user(user_id, user_data)
    return build_user_response(user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    current_user: Annotated[User, Depends(get_logged_user)],
    service: Annotated[UserService, Depends(get_user_service)],
):
    """Soft delete a user (marks it inactive)."""
    service.delete_user(user_id)


@router.post("/{user_id}/upload-photo", response_model=UserResponse)
async def upload_user_photo(
    user_id: int,
    file: Annotated[UploadFile, File(description="Profile photo (JPEG or PNG)")],
    current_user: Annotated[User, Depends(get_logged_user)],
    service: Annotated[UserService, Depends(get_user_service)],
):
    """Upload a profile photo for a user.

    Note: This endpoint must remain async because UploadFile.read() is async.
    """
    content = await file.read()
    user = service.upload_user_photo(user_id, file.filename, content)
    return build_user_response(user)
