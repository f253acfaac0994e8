from datetime import timedelta

import jwt
import pytest

from safetrade.core.errors import TokenError
from safetrade.services.token_service import TokenService
from safetrade.utils.dates import utc_now

SECRET = "token-service-secret-with-enough-length"
USER_PROFILE = {"id": 7, "email": "ana@example.com", "name": "Ana"}
ADMIN_PROFILE = {"id": 1, "email": "admin@safetrade.com", "isAdmin": True}


@pytest.fixture
def tokens():
    return TokenService(secret=SECRET)


def test_access_token_carries_profile(tokens):
    payload = tokens.verify_access_token(tokens.generate_access_token(USER_PROFILE))

    assert payload["sub"] == "7"
    assert payload["type"] == "access"
    assert payload["profile"] == USER_PROFILE


def test_admin_token_is_not_an_access_token(tokens):
    admin_token = tokens.generate_admin_token(ADMIN_PROFILE)

    assert tokens.verify_admin_token(admin_token)["profile"]["isAdmin"] is True
    with pytest.raises(TokenError, match="Tipo de token inválido"):
        tokens.verify_access_token(admin_token)


def test_refresh_token_type_depends_on_profile(tokens):
    user_refresh = tokens.decode(tokens.generate_refresh_token(USER_PROFILE))
    admin_refresh = tokens.decode(tokens.generate_refresh_token(ADMIN_PROFILE))

    assert user_refresh["type"] == "refresh"
    assert admin_refresh["type"] == "admin"
    assert "profile" not in user_refresh


def test_access_token_cannot_refresh(tokens):
    with pytest.raises(TokenError, match="renovación"):
        tokens.verify_refresh_token(tokens.generate_access_token(USER_PROFILE))


def test_expired_token_is_rejected(tokens):
    expired = jwt.encode(
        {"sub": "7", "type": "access", "exp": utc_now() - timedelta(minutes=1)},
        SECRET,
        algorithm="HS256",
    )

    with pytest.raises(TokenError, match="expirado"):
        tokens.verify_access_token(expired)


def test_token_signed_with_other_secret_is_rejected(tokens):
    forged = TokenService(secret="another-secret-that-is-also-long-enough").generate_access_token(USER_PROFILE)

    with pytest.raises(TokenError):
        tokens.verify_access_token(forged)
