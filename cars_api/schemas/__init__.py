"""Pydantic schemas for API requests and responses."""

from cars_api.schemas.auth import SignInRequest, TokenResponse
from cars_api.schemas.car import CarCreate, CarResponse, CarUpdate
from cars_api.schemas.user import UserCreate, UserResponse, UserUpdate

__all__ = [
    "SignInRequest",
    "TokenResponse",
    "CarCreate",
    "CarUpdate",
    "CarResponse",
    "UserCreate",
    "UserUpdate",
    "UserResponse",
]
