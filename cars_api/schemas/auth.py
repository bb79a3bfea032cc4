"""Authentication schemas."""

from pydantic import BaseModel, Field


class SignInRequest(BaseModel):
    """Sign-in request with login and password."""

    login: str = Field(..., max_length=255)
    password: str = Field(..., max_length=128)


class TokenResponse(BaseModel):
    """JWT token response."""

    access_token: str
    token_type: str = "bearer"  # noqa: S105
