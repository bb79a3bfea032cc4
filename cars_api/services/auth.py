"""Authentication service for JWT and password handling."""

import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta, timezone
from functools import lru_cache

from jose import jwt
from jose.exceptions import JOSEError
from passlib.context import CryptContext

from cars_api.config import Settings, get_settings
from cars_api.exceptions import ErrorMessage, TokenCreationError, UnauthorizedError
from cars_api.models.user import User
from cars_api.services.credential_store import CredentialStore

logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Every authenticated user gets the same single authority
DEFAULT_AUTHORITIES = ("read",)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def get_authorities(user: User) -> list[str]:
    """Authorities granted to an authenticated user."""
    return list(DEFAULT_AUTHORITIES)


def is_enabled(user: User) -> bool:
    """Check if the user may authenticate."""
    return not user.is_deleted


class TokenCodec:
    """Issues and verifies signed, time-limited bearer tokens.

    Tokens carry the issuer, the user's login as subject and an expiry. There
    is no server-side state: a token stays valid for its whole lifetime, even
    if the user's password changes afterwards.
    """

    def __init__(
        self,
        secret: str,
        issuer: str,
        algorithm: str = "HS256",
        lifetime: timedelta = timedelta(hours=2),
        utc_offset: timedelta = timedelta(hours=-3),
        clock: Callable[[], datetime] | None = None,
    ):
        self.secret = secret
        self.issuer = issuer
        self.algorithm = algorithm
        self.lifetime = lifetime
        self.zone = timezone(utc_offset)
        self._clock = clock or (lambda: datetime.now(UTC))

    @classmethod
    def from_settings(
        cls, settings: Settings, clock: Callable[[], datetime] | None = None
    ) -> "TokenCodec":
        """Build a codec from application settings."""
        return cls(
            secret=settings.jwt_secret,
            issuer=settings.jwt_issuer,
            algorithm=settings.jwt_algorithm,
            lifetime=timedelta(minutes=settings.jwt_expiration_minutes),
            utc_offset=timedelta(hours=settings.jwt_utc_offset_hours),
            clock=clock,
        )

    def now(self) -> datetime:
        """Current time on the issuance clock (fixed UTC offset)."""
        return self._clock().astimezone(self.zone)

    def issue(self, user: User) -> str:
        """Create a signed token for the user.

        Raises:
            TokenCreationError: if the token cannot be signed.
        """
        if not self.secret:
            logger.error("Cannot sign tokens: JWT secret is not configured")
            raise TokenCreationError()

        to_encode = {
            "iss": self.issuer,
            "sub": user.login,
            "exp": self.now() + self.lifetime,
        }
        try:
            return jwt.encode(to_encode, self.secret, algorithm=self.algorithm)
        except JOSEError as e:
            logger.error(f"Failed to sign token for '{user.login}': {e}")
            raise TokenCreationError() from e

    def validate(self, token: str) -> str | None:
        """Return the token's subject, or None if the token is not valid.

        A bad signature, wrong issuer, missing claim or expired token all
        yield None; callers treat that the same as no token at all.
        """
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                # Expiry is checked below against the codec's own clock. Requiring
                # exp here would make jose verify it against the wall clock.
                options={
                    "verify_exp": False,
                    "require_iss": True,
                    "require_sub": True,
                },
            )
        except JOSEError:
            return None

        expires_at = payload.get("exp")
        if not isinstance(expires_at, int | float):
            return None
        if self.now().timestamp() >= expires_at:
            return None

        return payload.get("sub")


@lru_cache
def get_token_codec() -> TokenCodec:
    """Get the token codec configured from settings."""
    return TokenCodec.from_settings(get_settings())


def resolve_identity(store: CredentialStore, codec: TokenCodec, token: str) -> User | None:
    """Resolve the user a bearer token belongs to.

    Returns None when the token is invalid or its subject no longer maps to an
    enabled user.
    """
    login = codec.validate(token)
    if login is None:
        return None

    user = store.find_user_by_login(login)
    if user is None or not is_enabled(user):
        logger.info(f"Token subject '{login}' does not match an active user")
        return None
    return user


def authenticate_user(store: CredentialStore, login: str, password: str) -> User:
    """Authenticate a user by login and password.

    Raises:
        UnauthorizedError: if the login is unknown, inactive or the password is wrong.
    """
    user = store.find_user_by_login(login)
    if user is None or not is_enabled(user) or not verify_password(password, user.password_hash):
        logger.warning(f"Failed login attempt for user with login: {login}")
        raise UnauthorizedError(ErrorMessage.INVALID_LOGIN_OR_PASSWORD)

    user.last_login = datetime.now(UTC)
    store.save_user(user)
    return user
