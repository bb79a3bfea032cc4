"""Car service. Every operation is scoped to the requesting owner."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cars_api.config import get_settings
from cars_api.database import atomic
from cars_api.exceptions import LicensePlateConflictError, ResourceNotFoundError
from cars_api.models.car import Car
from cars_api.models.user import User
from cars_api.schemas.car import CarCreate, CarUpdate
from cars_api.services.credential_store import CredentialStore
from cars_api.services.photo_storage import PhotoStorage
from cars_api.services.validation import ValidationService

logger = logging.getLogger(__name__)


class CarService:
    """Service for car-related operations."""

    def __init__(self, db: Session, photo_storage: PhotoStorage | None = None):
        self.db = db
        self.store = CredentialStore(db)
        self.validator = ValidationService(self.store)
        self.photo_storage = photo_storage or PhotoStorage(get_settings().upload_dir)

    def _get_owned_car(self, car_id: int, owner: User) -> Car:
        car = self.store.find_car_by_id_and_owner_login(car_id, owner.login)
        if car is None:
            raise ResourceNotFoundError()
        return car

    def create_car(self, car_data: CarCreate, owner: User) -> Car:
        """Create a car owned by ``owner``.

        Raises:
            MissingFieldsError: if the plate, model or color is blank.
            LicensePlateConflictError: if the plate is already registered.
        """
        logger.info(f"Creating car with license plate: {car_data.license_plate}")
        self.validator.validate_new_car(car_data)

        try:
            with atomic(self.db):
                car = Car(
                    year=car_data.year,
                    license_plate=car_data.license_plate,
                    model=car_data.model,
                    color=car_data.color,
                    usage_amount=0,
                    owner_id=owner.id,
                )
                self.store.save_car(car)
        except IntegrityError as e:
            # The plate is the only unique column on cars
            logger.warning(f"License plate {car_data.license_plate} taken by a concurrent write")
            raise LicensePlateConflictError(car_data.license_plate) from e

        self.db.refresh(car)
        logger.info(f"Car created successfully with ID: {car.id}")
        return car

    def list_cars(self, owner: User) -> list[Car]:
        """Get all cars owned by ``owner``."""
        cars = self.store.find_cars_by_owner_login(owner.login)
        logger.info(f"Retrieved {len(cars)} cars for user {owner.login}")
        return cars

    def get_car(self, car_id: int, owner: User) -> Car:
        """Get an owned car and count the read in its usage amount."""
        with atomic(self.db):
            car = self._get_owned_car(car_id, owner)
            car.usage_amount = (car.usage_amount or 0) + 1
            self.store.save_car(car)

        self.db.refresh(car)
        return car

    def update_car(self, car_id: int, car_data: CarUpdate, owner: User) -> Car:
        """Replace the details of an owned car.

        Raises:
            MissingFieldsError: if a field is blank or the year is missing.
            ResourceNotFoundError: if the caller does not own the car.
            LicensePlateConflictError: if the new plate belongs to another car.
        """
        logger.info(f"Updating car with ID: {car_id}")
        self.validator.validate_car_update(car_data)

        try:
            with atomic(self.db):
                car = self._get_owned_car(car_id, owner)
                if car_data.license_plate != car.license_plate:
                    other = self.store.find_car_by_license_plate(car_data.license_plate)
                    if other is not None and other.id != car.id:
                        raise LicensePlateConflictError(car_data.license_plate)

                car.year = car_data.year
                car.license_plate = car_data.license_plate
                car.model = car_data.model
                car.color = car_data.color
                self.store.save_car(car)
        except IntegrityError as e:
            logger.warning(f"License plate {car_data.license_plate} taken by a concurrent write")
            raise LicensePlateConflictError(car_data.license_plate) from e

        self.db.refresh(car)
        logger.info(f"Car updated successfully with ID: {car_id}")
        return car

    def delete_car(self, car_id: int, owner: User) -> None:
        """Permanently delete an owned car."""
        logger.info(f"Deleting car with ID: {car_id}")
        with atomic(self.db):
            car = self._get_owned_car(car_id, owner)
            self.store.delete_car(car)
        logger.info(f"Car deleted successfully with ID: {car_id}")

    def upload_car_photo(
        self, car_id: int, filename: str | None, content: bytes, owner: User
    ) -> Car:
        """Store a photo for an owned car and record its path."""
        logger.info(f"Uploading photo for car with ID: {car_id}")
        with atomic(self.db):
            car = self._get_owned_car(car_id, owner)
            car.photo_car_url = self.photo_storage.save("cars", car.id, filename, content)
            self.store.save_car(car)

        self.db.refresh(car)
        return car
