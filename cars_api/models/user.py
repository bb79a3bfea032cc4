"""User model."""

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from cars_api.database import Base
from cars_api.models.mixins import StatusSoftDeleteMixin, TimestampMixin


class User(Base, TimestampMixin, StatusSoftDeleteMixin):
    """User model for authentication and car ownership."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=False)
    birthday = Column(String(50), nullable=False)  # free text, e.g. "1990-05-01"
    login = Column(String(255), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=False)
    last_login = Column(DateTime(timezone=True), nullable=True)
    photo_profile_url = Column(String(500), nullable=True)

    # Removing a car from this collection detaches it; the row is kept
    cars = relationship("Car", back_populates="owner", order_by="Car.id")
