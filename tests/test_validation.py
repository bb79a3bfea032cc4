"""Tests for the validation service."""

import pytest

from cars_api.exceptions import (
    DuplicateField,
    DuplicateResourceError,
    LicensePlateConflictError,
    MissingFieldsError,
)
from cars_api.schemas.car import CarCreate, CarUpdate
from cars_api.schemas.user import UserUpdate
from cars_api.services.credential_store import CredentialStore
from cars_api.services.validation import REQUIRED_USER_FIELDS, ValidationService


@pytest.fixture
def validator(db):
    return ValidationService(CredentialStore(db))


def test_valid_new_user_passes(validator, user_payload):
    """Test that a complete, unique payload is accepted."""
    validator.validate_new_user(user_payload("alice"))


@pytest.mark.parametrize("field", REQUIRED_USER_FIELDS)
def test_new_user_missing_field(validator, user_payload, field):
    """Test that each required field is enforced."""
    payload = user_payload("alice").model_copy(update={field: None})

    with pytest.raises(MissingFieldsError):
        validator.validate_new_user(payload)


def test_new_user_blank_field(validator, user_payload):
    """Test that whitespace-only values count as blank."""
    with pytest.raises(MissingFieldsError):
        validator.validate_new_user(user_payload("alice", first_name="   "))


def test_new_user_duplicate_email(validator, user_payload, make_user):
    """Test that a taken email is rejected."""
    make_user("alice", email="a@x.com")

    with pytest.raises(DuplicateResourceError) as exc_info:
        validator.validate_new_user(user_payload("other", email="a@x.com"))

    assert exc_info.value.field == DuplicateField.EMAIL


def test_new_user_duplicate_login(validator, user_payload, make_user):
    """Test that a taken login is rejected."""
    make_user("alice")

    with pytest.raises(DuplicateResourceError) as exc_info:
        validator.validate_new_user(user_payload("alice", email="fresh@example.com"))

    assert exc_info.value.field == DuplicateField.LOGIN


def test_new_user_check_order(validator, user_payload, make_user):
    """Test that missing fields win over duplicates, and email over login."""
    make_user("alice")

    with pytest.raises(MissingFieldsError):
        validator.validate_new_user(user_payload("alice", phone=""))

    with pytest.raises(DuplicateResourceError) as exc_info:
        validator.validate_new_user(user_payload("alice"))
    assert exc_info.value.field == DuplicateField.EMAIL


def test_user_update_unchanged_values_pass(validator, make_user):
    """Test that resubmitting the user's own email and login is allowed."""
    alice = make_user("alice")

    validator.validate_user_update(
        alice, UserUpdate(email="alice@example.com", login="alice")
    )


def test_user_update_email_taken(validator, make_user):
    """Test that changing to another user's email is rejected."""
    make_user("alice")
    bob = make_user("bob")

    with pytest.raises(DuplicateResourceError) as exc_info:
        validator.validate_user_update(bob, UserUpdate(email="alice@example.com"))

    assert exc_info.value.field == DuplicateField.EMAIL


def test_user_update_login_taken(validator, make_user):
    """Test that changing to another user's login is rejected."""
    make_user("alice")
    bob = make_user("bob")

    with pytest.raises(DuplicateResourceError) as exc_info:
        validator.validate_user_update(bob, UserUpdate(login="alice"))

    assert exc_info.value.field == DuplicateField.LOGIN


def test_user_update_does_not_require_fields(validator, make_user):
    """Test that updates skip blank-field checks."""
    bob = make_user("bob")

    validator.validate_user_update(bob, UserUpdate(first_name=""))


def test_new_car_missing_fields(validator):
    """Test that plate, model and color are required for a new car."""
    with pytest.raises(MissingFieldsError):
        validator.validate_new_car(CarCreate(license_plate="ABC1234", model="Uno", color=" "))

    with pytest.raises(MissingFieldsError):
        validator.validate_new_car(CarCreate(model="Uno", color="Red"))


def test_new_car_existing_plate(validator, car_service, make_user):
    """Test that a registered plate is rejected as a conflict."""
    alice = make_user("alice")
    car_service.create_car(
        CarCreate(license_plate="ABC1234", model="Uno", color="Red", year=2010), alice
    )

    with pytest.raises(LicensePlateConflictError) as exc_info:
        validator.validate_new_car(CarCreate(license_plate="ABC1234", model="Gol", color="Blue"))

    assert isinstance(exc_info.value, MissingFieldsError)
    assert exc_info.value.license_plate == "ABC1234"


def test_new_car_year_optional(validator):
    """Test that a new car does not need a year."""
    validator.validate_new_car(CarCreate(license_plate="ABC1234", model="Uno", color="Red"))


def test_car_update_requires_year(validator):
    """Test that updating a car requires the year."""
    with pytest.raises(MissingFieldsError):
        validator.validate_car_update(CarUpdate(license_plate="ABC1234", model="Uno", color="Red"))

    validator.validate_car_update(
        CarUpdate(license_plate="ABC1234", model="Uno", color="Red", year=2012)
    )
