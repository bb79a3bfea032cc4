"""Car schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CarCreate(BaseModel):
    """Create a car, standalone or inside a user payload.

    Blank fields are accepted here and rejected by the validation service.
    """

    year: int | None = None
    license_plate: str | None = Field(None, max_length=20)
    model: str | None = Field(None, max_length=255)
    color: str | None = Field(None, max_length=50)


class CarUpdate(BaseModel):
    """Replace a car's details."""

    year: int | None = None
    license_plate: str | None = Field(None, max_length=20)
    model: str | None = Field(None, max_length=255)
    color: str | None = Field(None, max_length=50)


class CarResponse(BaseModel):
    """Car response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    year: int | None
    license_plate: str
    model: str | None
    color: str | None
    usage_amount: int
    photo_car_url: str | None
    owner_id: int | None
    created_at: datetime
    updated_at: datetime
