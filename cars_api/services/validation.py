"""Validation rules applied before users and cars are written."""

from typing import Any

from cars_api.exceptions import (
    DuplicateField,
    DuplicateResourceError,
    LicensePlateConflictError,
    MissingFieldsError,
)
from cars_api.models.user import User
from cars_api.services.credential_store import CredentialStore

REQUIRED_USER_FIELDS = (
    "first_name",
    "last_name",
    "birthday",
    "password",
    "phone",
    "login",
    "email",
)
REQUIRED_CAR_FIELDS = ("license_plate", "model", "color")


def is_blank(value: Any) -> bool:
    """Check if a value is None or only whitespace."""
    return value is None or (isinstance(value, str) and not value.strip())


class ValidationService:
    """Required-field and uniqueness checks for users and cars.

    Each check raises on the first failure; errors are never aggregated.
    """

    def __init__(self, store: CredentialStore):
        self.store = store

    def validate_new_user(self, dto: Any) -> None:
        """Validate a registration payload.

        Raises:
            MissingFieldsError: if any required field is blank.
            DuplicateResourceError: if the email, then the login, is taken.
        """
        if any(is_blank(getattr(dto, field, None)) for field in REQUIRED_USER_FIELDS):
            raise MissingFieldsError()

        if self.store.find_user_by_email(dto.email) is not None:
            raise DuplicateResourceError(DuplicateField.EMAIL)

        if self.store.find_user_by_login(dto.login) is not None:
            raise DuplicateResourceError(DuplicateField.LOGIN)

    def validate_user_update(self, existing: User, incoming: Any) -> None:
        """Check uniqueness of the email and login an update changes.

        Blank fields are not rejected here: an update only overwrites the
        fields it provides.
        """
        email = getattr(incoming, "email", None)
        if email is not None and email != existing.email:
            owner = self.store.find_user_by_email(email)
            if owner is not None and owner.id != existing.id:
                raise DuplicateResourceError(DuplicateField.EMAIL)

        login = getattr(incoming, "login", None)
        if login is not None and login != existing.login:
            owner = self.store.find_user_by_login(login)
            if owner is not None and owner.id != existing.id:
                raise DuplicateResourceError(DuplicateField.LOGIN)

    def validate_new_car(self, dto: Any) -> None:
        """Validate a standalone car creation payload.

        Raises:
            MissingFieldsError: if the plate, model or color is blank.
            LicensePlateConflictError: if the plate is already registered.
        """
        if any(is_blank(getattr(dto, field, None)) for field in REQUIRED_CAR_FIELDS):
            raise MissingFieldsError()

        if self.store.find_car_by_license_plate(dto.license_plate) is not None:
            raise LicensePlateConflictError(dto.license_plate)

    def validate_car_update(self, dto: Any) -> None:
        """Validate a car replacement payload; year is required here."""
        if any(is_blank(getattr(dto, field, None)) for field in REQUIRED_CAR_FIELDS):
            raise MissingFieldsError()
        if dto.year is None:
            raise MissingFieldsError()
