"""Tests for token issuance, validation and identity resolution."""

from datetime import UTC, datetime, timedelta

import pytest
from jose import jwt

from cars_api.config import get_settings
from cars_api.exceptions import TokenCreationError
from cars_api.models.user import User
from cars_api.services.auth import TokenCodec, get_authorities, is_enabled, resolve_identity
from cars_api.services.credential_store import CredentialStore

SECRET = "test-secret"
ISSUER = "challenger-cars-api"


class FakeClock:
    """Settable clock for simulating the passage of time."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 3, 1, 12, 0, tzinfo=UTC))


@pytest.fixture
def codec(clock):
    return TokenCodec(SECRET, ISSUER, clock=clock)


def test_issue_and_validate_round_trip(codec):
    """Test that a fresh token yields the user's login."""
    token = codec.issue(User(login="bob"))

    assert codec.validate(token) == "bob"


def test_token_claims(codec, clock):
    """Test issuer, subject and a two hour expiry in the token."""
    token = codec.issue(User(login="bob"))
    claims = jwt.get_unverified_claims(token)

    assert claims["iss"] == ISSUER
    assert claims["sub"] == "bob"
    assert claims["exp"] == int((clock.now + timedelta(hours=2)).timestamp())


def test_issuance_clock_uses_fixed_offset(codec):
    """Test that issuance time is expressed at UTC-3."""
    assert codec.now().utcoffset() == timedelta(hours=-3)


def test_token_valid_until_expiry(codec, clock):
    """Test that a token is still valid just before two hours have passed."""
    token = codec.issue(User(login="bob"))

    clock.advance(timedelta(hours=1, minutes=59))

    assert codec.validate(token) == "bob"


def test_expired_token_is_invalid(codec, clock):
    """Test that a token past its two hour window is rejected."""
    token = codec.issue(User(login="bob"))

    clock.advance(timedelta(hours=2, minutes=1))

    assert codec.validate(token) is None


@pytest.mark.parametrize(
    "start",
    [datetime(2001, 6, 1, 9, 30, tzinfo=UTC), datetime(2090, 1, 1, 0, 0, tzinfo=UTC)],
)
def test_expiry_follows_codec_clock_not_wall_clock(start):
    """Test that validity is judged only by the codec's clock."""
    clock = FakeClock(start)
    codec = TokenCodec(SECRET, ISSUER, clock=clock)
    token = codec.issue(User(login="bob"))

    clock.advance(timedelta(hours=1))
    assert codec.validate(token) == "bob"

    clock.advance(timedelta(hours=1))
    assert codec.validate(token) is None


def test_token_without_expiry_is_invalid(codec):
    """Test that a correctly signed token lacking an expiry is rejected."""
    token = jwt.encode({"iss": ISSUER, "sub": "bob"}, SECRET, algorithm="HS256")

    assert codec.validate(token) is None


def test_wrong_secret_is_invalid(codec, clock):
    """Test that a token signed with another secret is rejected."""
    other = TokenCodec("another-secret", ISSUER, clock=clock)
    token = other.issue(User(login="bob"))

    assert codec.validate(token) is None


def test_wrong_issuer_is_invalid(codec, clock):
    """Test that a token from another issuer is rejected."""
    other = TokenCodec(SECRET, "someone-else", clock=clock)
    token = other.issue(User(login="bob"))

    assert codec.validate(token) is None


def test_token_without_subject_is_invalid(codec, clock):
    """Test that a correctly signed token lacking a subject is rejected."""
    token = jwt.encode(
        {"iss": ISSUER, "exp": clock.now + timedelta(hours=1)}, SECRET, algorithm="HS256"
    )

    assert codec.validate(token) is None


@pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
def test_malformed_token_is_invalid(codec, token):
    """Test that malformed tokens are rejected without raising."""
    assert codec.validate(token) is None


def test_blank_secret_fails_token_creation(clock):
    """Test that a missing secret is reported as a creation failure."""
    codec = TokenCodec("", ISSUER, clock=clock)

    with pytest.raises(TokenCreationError):
        codec.issue(User(login="bob"))


def test_codec_from_settings():
    """Test building a codec from application settings."""
    settings = get_settings()
    codec = TokenCodec.from_settings(settings)

    assert codec.issuer == settings.jwt_issuer
    assert codec.lifetime == timedelta(minutes=settings.jwt_expiration_minutes)
    assert codec.validate(codec.issue(User(login="bob"))) == "bob"


def test_resolve_identity(db, codec, make_user):
    """Test that a valid token resolves to the stored user."""
    user = make_user("bob")
    token = codec.issue(user)

    resolved = resolve_identity(CredentialStore(db), codec, token)

    assert resolved is not None
    assert resolved.id == user.id
    assert resolved.login == "bob"


def test_resolve_identity_after_expiry(db, codec, clock, make_user):
    """Test that an expired token resolves to no identity."""
    token = codec.issue(make_user("bob"))

    clock.advance(timedelta(hours=3))

    assert resolve_identity(CredentialStore(db), codec, token) is None


def test_resolve_identity_unknown_user(db, codec):
    """Test that a token for a login with no user resolves to no identity."""
    token = codec.issue(User(login="ghost"))

    assert resolve_identity(CredentialStore(db), codec, token) is None


def test_resolve_identity_inactive_user(db, codec, make_user, user_service):
    """Test that a soft-deleted user's token resolves to no identity."""
    user = make_user("bob")
    token = codec.issue(user)

    user_service.delete_user(user.id)

    assert resolve_identity(CredentialStore(db), codec, token) is None


def test_active_user_capabilities(make_user):
    """Test that an active user is enabled with the read authority."""
    user = make_user("bob")

    assert is_enabled(user)
    assert get_authorities(user) == ["read"]


def test_inactive_user_is_disabled(make_user, user_service):
    user = make_user("bob")

    user_service.delete_user(user.id)

    assert not is_enabled(user)
