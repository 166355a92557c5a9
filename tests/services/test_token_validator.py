import jwt
import pytest

from app.config import ConfigAuth
from app.services.auth.factory import TokenValidatorFactory
from app.services.auth.token_validator import (
    JwtTokenValidator,
    NullTokenValidator,
    strip_bearer,
)

SECRET = "a-test-secret-that-is-long-enough-for-hs256"


def test_strip_bearer() -> None:
    assert strip_bearer("Bearer abc") == "abc"
    assert strip_bearer("bearer  abc ") == "abc"
    assert strip_bearer("abc") == "abc"


def test_null_validator_accepts_any_token() -> None:
    validator = NullTokenValidator()

    assert validator.validate("Bearer anything") is True
    assert validator.get_claims("Bearer anything") == {}


def test_jwt_validator() -> None:
    validator = JwtTokenValidator(SECRET)
    token = jwt.encode({"sub": "u1"}, SECRET, algorithm="HS256")

    assert validator.validate(f"Bearer {token}") is True
    assert validator.get_claims(f"Bearer {token}")["sub"] == "u1"


def test_jwt_validator_rejects_foreign_token() -> None:
    validator = JwtTokenValidator(SECRET)
    token = jwt.encode({"sub": "u1"}, "another-secret-that-is-long-enough-too", algorithm="HS256")

    assert validator.validate(f"Bearer {token}") is False
    assert validator.validate("Bearer not-a-jwt") is False


def test_factory() -> None:
    assert isinstance(TokenValidatorFactory(ConfigAuth(enabled=False)).create(), NullTokenValidator)
    assert isinstance(
        TokenValidatorFactory(ConfigAuth(enabled=True, jwt_secret=SECRET)).create(),
        JwtTokenValidator,
    )

    with pytest.raises(ValueError, match="jwt_secret"):
        TokenValidatorFactory(ConfigAuth(enabled=True)).create()
