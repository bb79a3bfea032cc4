"""SQLAlchemy models."""

from cars_api.models.car import Car
from cars_api.models.enums import UserStatus
from cars_api.models.user import User

__all__ = [
    "User",
    "UserStatus",
    "Car",
]
