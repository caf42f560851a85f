from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from coastwatch.core.config import settings
from coastwatch.core.errors import BadRequest, Conflict, Forbidden, NotFound, Unauthorized
from coastwatch.models.user import Role
from coastwatch.services.auth import AuthService


async def test_register_then_login_yields_same_user(db):
    user, token = await AuthService.register(db, "dana@example.com", "pw-123456", name="Dana")
    assert user.id > 0
    assert user.role is Role.CITIZEN
    assert user.password_hash != "pw-123456"
    assert AuthService.verify(token) == user.id

    same, login_token = await AuthService.login(db, "dana@example.com", "pw-123456")
    assert same.id == user.id
    assert AuthService.verify(login_token) == user.id


async def test_token_claims(db):
    user, token = await AuthService.register(db, "erin@example.com", "pw-123456")
    claims = jwt.get_unverified_claims(token)
    assert claims["userId"] == user.id
    assert claims["iss"] == settings.JWT_ISSUER
    assert claims["exp"] - claims["iat"] == settings.JWT_EXPIRE_DAYS * 24 * 3600


async def test_register_role_is_case_insensitive(db):
    user, _ = await AuthService.register(db, "olga@example.com", "pw-123456", role="official")
    assert user.role is Role.OFFICIAL


async def test_register_rejects_unknown_role(db):
    with pytest.raises(BadRequest) as exc:
        await AuthService.register(db, "x@example.com", "pw-123456", role="superuser")
    assert exc.value.message == "Invalid role: superuser"


@pytest.mark.parametrize("email,password", [(None, "pw"), ("a@example.com", None), ("", "pw"), ("a@example.com", "  ")])
async def test_register_requires_email_and_password(db, email, password):
    with pytest.raises(BadRequest):
        await AuthService.register(db, email, password)


async def test_register_duplicate_email_conflicts(db):
    await AuthService.register(db, "dup@example.com", "pw-123456")
    with pytest.raises(Conflict):
        await AuthService.register(db, "dup@example.com", "another-pw")


async def test_login_rejects_bad_credentials(db):
    await AuthService.register(db, "fay@example.com", "right-pw")
    with pytest.raises(Unauthorized):
        await AuthService.login(db, "fay@example.com", "wrong-pw")
    with pytest.raises(Unauthorized):
        await AuthService.login(db, "nobody@example.com", "right-pw")
    with pytest.raises(BadRequest):
        await AuthService.login(db, "fay@example.com", None)


def _token(**overrides):
    now = datetime.now(timezone.utc)
    claims = {"userId": 1, "iss": settings.JWT_ISSUER, "iat": now, "exp": now + timedelta(days=1)}
    claims.update(overrides)
    secret = claims.pop("secret", settings.JWT_SECRET)
    return jwt.encode(claims, secret, algorithm=settings.JWT_ALGORITHM)


@pytest.mark.parametrize(
    "token",
    [
        "not-a-jwt",
        _token(exp=datetime.now(timezone.utc) - timedelta(minutes=1)),
        _token(secret="someone-elses-secret"),
        _token(iss="another-issuer"),
        _token(userId="1"),
        _token(userId=0),
    ],
)
def test_verify_rejects_invalid_tokens(token):
    with pytest.raises(Forbidden):
        AuthService.verify(token)


async def test_current_user_missing(db):
    with pytest.raises(NotFound):
        await AuthService.current_user(db, 999)
