"""Authentication API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from cars_api.api.dependencies import get_logged_user
from cars_api.api.users import build_user_response
from cars_api.database import atomic, get_db
from cars_api.models.user import User
from cars_api.schemas.auth import SignInRequest, TokenResponse
from cars_api.schemas.user import UserResponse
from cars_api.services.auth import TokenCodec, authenticate_user, get_token_codec
from cars_api.services.credential_store import CredentialStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/signin", response_model=TokenResponse)
def sign_in(
    credentials: SignInRequest,
    db: Annotated[Session, Depends(get_db)],
    token_codec: Annotated[TokenCodec, Depends(get_token_codec)],
):
    """Sign in with login and password and receive a bearer token."""
    with atomic(db):
        user = authenticate_user(CredentialStore(db), credentials.login, credentials.password)
        access_token = token_codec.issue(user)

    logger.info(f"User authenticated successfully with login: {credentials.login}")
    return TokenResponse(access_token=access_token)


@router.get("/me", response_model=UserResponse)
def get_me(
    current_user: Annotated[User, Depends(get_logged_user)],
):
    """Get current user information."""
    return build_user_response(current_user)
