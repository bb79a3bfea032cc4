"""FastAPI dependencies for authentication and database."""

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from cars_api.database import get_db
from cars_api.exceptions import UnauthorizedError
from cars_api.models.user import User
from cars_api.services.auth import TokenCodec, get_token_codec, resolve_identity
from cars_api.services.car_service import CarService
from cars_api.services.credential_store import CredentialStore
from cars_api.services.user_service import UserService

# A missing or malformed header is not an error here; routes that need an
# identity fail later through get_logged_user.
security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class RequestIdentity:
    """Identity resolved for a single request."""

    user: User | None = None

    def get_logged_user(self) -> User:
        """Get the authenticated user, or raise UnauthorizedError."""
        if self.user is None:
            raise UnauthorizedError()
        return self.user


def get_request_identity(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
    token_codec: Annotated[TokenCodec, Depends(get_token_codec)],
) -> RequestIdentity:
    """Resolve the caller from the bearer token, once per request."""
    if credentials is None:
        return RequestIdentity()

    user = resolve_identity(CredentialStore(db), token_codec, credentials.credentials)
    return RequestIdentity(user=user)


def get_logged_user(
    identity: Annotated[RequestIdentity, Depends(get_request_identity)],
) -> User:
    """Get the current authenticated user."""
    return identity.get_logged_user()


def get_user_service(
    db: Annotated[Session, Depends(get_db)],
) -> UserService:
    """Get user service with dependencies."""
    return UserService(db)


def get_car_service(
    db: Annotated[Session, Depends(get_db)],
) -> CarService:
    """Get car service with dependencies."""
    return CarService(db)
