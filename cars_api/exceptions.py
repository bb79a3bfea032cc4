"""Domain errors raised by the services.

Each error carries an ``ErrorMessage`` holding the caller-facing message and
the HTTP status the API layer answers with.
"""

from enum import Enum

from fastapi import status


class ErrorMessage(Enum):
    """Caller-facing error messages and their HTTP status codes."""

    LOGIN_ALREADY_EXISTS = ("Login already exists", status.HTTP_409_CONFLICT)
    EMAIL_ALREADY_EXISTS = ("Email already exists", status.HTTP_409_CONFLICT)
    LICENSE_PLATE_ALREADY_EXISTS = ("License plate already exists", status.HTTP_409_CONFLICT)
    INVALID_LOGIN_OR_PASSWORD = ("Invalid login or password", status.HTTP_401_UNAUTHORIZED)
    UNAUTHORIZED = ("Unauthorized", status.HTTP_401_UNAUTHORIZED)
    MISSING_FIELDS = ("Missing fields", status.HTTP_400_BAD_REQUEST)
    RESOURCE_NOT_FOUND = ("Resource not found", status.HTTP_404_NOT_FOUND)
    INVALID_PHOTO = ("Failed to upload photo", status.HTTP_400_BAD_REQUEST)
    TOKEN_CREATION_FAILED = ("Error while authenticating", status.HTTP_500_INTERNAL_SERVER_ERROR)

    def __init__(self, message: str, status_code: int):
        self.message = message
        self.status_code = status_code


class DuplicateField(str, Enum):
    """Unique user fields that can collide."""

    EMAIL = "email"
    LOGIN = "login"


class CarsApiError(Exception):
    """Base class for all domain errors."""

    default_error = ErrorMessage.MISSING_FIELDS

    def __init__(self, error: ErrorMessage | None = None):
        self.error = error or self.default_error
        super().__init__(self.error.message)

    @property
    def message(self) -> str:
        return self.error.message

    @property
    def status_code(self) -> int:
        return self.error.status_code


class MissingFieldsError(CarsApiError):
    """A required field is blank or absent."""

    default_error = ErrorMessage.MISSING_FIELDS


class LicensePlateConflictError(MissingFieldsError):
    """A license plate already belongs to another car or owner.

    Subclasses ``MissingFieldsError`` because callers historically received
    the plate conflict as a missing-fields failure.
    """

    default_error = ErrorMessage.LICENSE_PLATE_ALREADY_EXISTS

    def __init__(self, license_plate: str):
        self.license_plate = license_plate
        super().__init__()


class DuplicateResourceError(CarsApiError):
    """A unique user field (email or login) is already taken."""

    def __init__(self, field: DuplicateField):
        self.field = field
        error = (
            ErrorMessage.EMAIL_ALREADY_EXISTS
            if field == DuplicateField.EMAIL
            else ErrorMessage.LOGIN_ALREADY_EXISTS
        )
        super().__init__(error)


class ResourceNotFoundError(CarsApiError):
    """A lookup by id or plate found nothing when one was required."""

    default_error = ErrorMessage.RESOURCE_NOT_FOUND


class UnauthorizedError(CarsApiError):
    """No identity was resolved for the request, or credentials were wrong."""

    default_error = ErrorMessage.UNAUTHORIZED


class TokenCreationError(CarsApiError):
    """Signing a token failed; this is a configuration fault."""

    default_error = ErrorMessage.TOKEN_CREATION_FAILED


class InvalidPhotoError(CarsApiError):
    """Writing an uploaded photo to disk failed."""

    default_error = ErrorMessage.INVALID_PHOTO
