"""Enums for model fields."""

from enum import Enum


class UserStatus(str, Enum):
    """Account status of a user."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
