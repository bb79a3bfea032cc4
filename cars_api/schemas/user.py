"""User schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from cars_api.models.enums import UserStatus
from cars_api.schemas.car import CarCreate, CarResponse


class UserCreate(BaseModel):
    """Register a new user, optionally with cars."""

    first_name: str | None = Field(None, max_length=255)
    last_name: str | None = Field(None, max_length=255)
    birthday: str | None = Field(None, max_length=50)
    login: str | None = Field(None, max_length=255)
    password: str | None = Field(None, max_length=128)
    email: EmailStr | None = None
    phone: str | None = Field(None, max_length=50)
    cars: list[CarCreate] | None = None


class UserUpdate(BaseModel):
    """Partially update a user. Omitted fields keep their current value.

    When ``cars`` is given it becomes the user's full set of owned cars.
    """

    first_name: str | None = Field(None, max_length=255)
    last_name: str | None = Field(None, max_length=255)
    birthday: str | None = Field(None, max_length=50)
    login: str | None = Field(None, max_length=255)
    password: str | None = Field(None, max_length=128)
    email: EmailStr | None = None
    phone: str | None = Field(None, max_length=50)
    cars: list[CarCreate] | None = None


class UserResponse(BaseModel):
    """User information response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    email: str
    birthday: str
    login: str
    phone: str
    status: UserStatus
    photo_profile_url: str | None
    last_login: datetime | None
    created_at: datetime
    cars: list[CarResponse] = []
