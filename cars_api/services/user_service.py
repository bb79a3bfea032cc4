"""User service for registration, updates and soft deletion."""

import logging
from typing import NoReturn

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cars_api.config import get_settings
from cars_api.database import atomic
from cars_api.exceptions import (
    CarsApiError,
    DuplicateField,
    DuplicateResourceError,
    LicensePlateConflictError,
    ResourceNotFoundError,
)
from cars_api.models.car import Car
from cars_api.models.enums import UserStatus
from cars_api.models.user import User
from cars_api.schemas.user import UserCreate, UserUpdate
from cars_api.services.auth import get_password_hash
from cars_api.services.credential_store import CredentialStore
from cars_api.services.photo_storage import PhotoStorage
from cars_api.services.reconciler import CarReconciler
from cars_api.services.validation import ValidationService

logger = logging.getLogger(__name__)

# Fields an update copies over when present; password is handled separately
UPDATABLE_USER_FIELDS = ("first_name", "last_name", "birthday", "login", "email", "phone")


def sort_cars_by_usage(cars: list[Car]) -> list[Car]:
    """Return cars ordered by usage amount, most used first."""
    return sorted(cars, key=lambda car: car.usage_amount or 0, reverse=True)


class UserService:
    """Service for user-related operations."""

    def __init__(self, db: Session, photo_storage: PhotoStorage | None = None):
        self.db = db
        self.store = CredentialStore(db)
        self.validator = ValidationService(self.store)
        self.reconciler = CarReconciler(self.store)
        self.photo_storage = photo_storage or PhotoStorage(get_settings().upload_dir)

    def create_user(self, user_data: UserCreate) -> User:
        """Register a new active user, with any cars in the payload.

        Raises:
            MissingFieldsError: if a required field is blank.
            DuplicateResourceError: if the email or login is taken.
        """
        logger.info(f"Creating user with login: {user_data.login}")
        self.validator.validate_new_user(user_data)

        try:
            with atomic(self.db):
                user = User(
                    first_name=user_data.first_name,
                    last_name=user_data.last_name,
                    birthday=user_data.birthday,
                    login=user_data.login,
                    email=user_data.email,
                    phone=user_data.phone,
                    password_hash=get_password_hash(user_data.password),
                    status=UserStatus.ACTIVE,
                )
                if user_data.cars:
                    self.reconciler.assign_on_create(user, user_data.cars)
                self.store.save_user(user)
        except IntegrityError as e:
            self._raise_unique_violation(None, user_data, e)

        self.db.refresh(user)
        logger.info(f"User created successfully with ID: {user.id}")
        return user

    def _raise_unique_violation(
        self, user_id: int | None, user_data: UserCreate | UserUpdate, cause: IntegrityError
    ) -> NoReturn:
        """Report a unique index hit as the domain error for the taken value.

        Reached when a concurrent request commits the same email, login or
        plate after the pre-checks passed. The session is already rolled back.
        """
        error: CarsApiError | None = None
        for field, find in (
            (DuplicateField.EMAIL, self.store.find_user_by_email),
            (DuplicateField.LOGIN, self.store.find_user_by_login),
        ):
            value = getattr(user_data, field.value)
            owner = find(value) if value is not None else None
            if owner is not None and owner.id != user_id:
                error = DuplicateResourceError(field)
                break
        else:
            for entry in user_data.cars or []:
                car = self.store.find_car_by_license_plate(entry.license_plate)
                if car is not None and car.owner_id != user_id:
                    error = LicensePlateConflictError(entry.license_plate)
                    break

        if error is None:
            raise cause
        logger.warning(f"Unique value taken by a concurrent write: {error.message}")
        raise error from cause

    def list_users(self) -> list[User]:
        """Get all active users."""
        return self.store.find_users_by_status(UserStatus.ACTIVE)

    def get_user(self, user_id: int) -> User:
        """Get an active user by id.

        Raises:
            ResourceNotFoundError: if no active user has this id.
        """
        user = self.store.find_user_by_id_and_status(user_id, UserStatus.ACTIVE)
        if user is None:
            raise ResourceNotFoundError()
        return user

    def update_user(self, user_id: int, user_data: UserUpdate) -> User:
        """Merge the provided fields into an active user.

        When ``cars`` is provided it is reconciled against the user's cars.
        The whole update is applied in one transaction or not at all.
        """
        logger.info(f"Updating user with ID: {user_id}")
        try:
            with atomic(self.db):
                user = self.get_user(user_id)
                self.validator.validate_user_update(user, user_data)

                if user_data.cars is not None:
                    self.reconciler.reconcile(user, user_data.cars)

                for field in UPDATABLE_USER_FIELDS:
                    value = getattr(user_data, field)
                    if value is not None:
                        setattr(user, field, value)
                if user_data.password is not None:
                    user.password_hash = get_password_hash(user_data.password)

                self.store.save_user(user)
        except IntegrityError as e:
            self._raise_unique_violation(user_id, user_data, e)

        self.db.refresh(user)
        logger.info(f"User updated successfully with ID: {user_id}")
        return user

    def delete_user(self, user_id: int) -> None:
        """Soft delete a user by marking it inactive.

        Raises:
            ResourceNotFoundError: if the user does not exist.
        """
        logger.info(f"Deleting user with ID: {user_id}")
        with atomic(self.db):
            user = self.store.find_user_by_id(user_id)
            if user is None:
                raise ResourceNotFoundError()
            user.soft_delete()
            self.store.save_user(user)
        logger.info(f"User deactivated with ID: {user_id}")

    def upload_user_photo(self, user_id: int, filename: str | None, content: bytes) -> User:
        """Store a profile photo for a user and record its path.

        Raises:
            ResourceNotFoundError: if the user does not exist.
            InvalidPhotoError: if the photo cannot be written.
        """
        logger.info(f"Uploading photo for user with ID: {user_id}")
        with atomic(self.db):
            user = self.store.find_user_by_id(user_id)
            if user is None:
                raise ResourceNotFoundError()
            user.photo_profile_url = self.photo_storage.save("users", user.id, filename, content)
            self.store.save_user(user)

        self.db.refresh(user)
        return user
