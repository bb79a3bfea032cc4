"""Car model."""

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from cars_api.database import Base
from cars_api.models.mixins import TimestampMixin


class Car(Base, TimestampMixin):
    """Car model. License plates are unique across all owners."""

    __tablename__ = "cars"

    id = Column(Integer, primary_key=True, index=True)
    year = Column(Integer, nullable=True)
    license_plate = Column(String(20), unique=True, nullable=False, index=True)
    model = Column(String(255), nullable=True)
    color = Column(String(50), nullable=True)
    usage_amount = Column(Integer, nullable=False, default=0)
    photo_car_url = Column(String(500), nullable=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)

    # Relationships
    owner = relationship("User", back_populates="cars")
