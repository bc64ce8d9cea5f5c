from datetime import timedelta

from jose import jwt

from listings_service.config import settings
from listings_service.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


def test_password_hashing():
    hashed = hash_password("s3cret")
    assert hashed != "s3cret"
    assert verify_password("s3cret", hashed)
    assert not verify_password("wrong", hashed)


def test_verify_password_with_malformed_hash():
    assert verify_password("s3cret", "not-a-bcrypt-hash") is False


def test_access_token_round_trip():
    token = create_access_token("user-1", "admin@example.com", "admin")
    payload = decode_access_token(token)
    assert payload["user_id"] == "user-1"
    assert payload["sub"] == "user-1"
    assert payload["email"] == "admin@example.com"
    assert payload["role"] == "admin"


def test_expired_token_is_rejected():
    token = create_access_token("user-1", "a@example.com", "admin", expires_delta=timedelta(seconds=-5))
    assert decode_access_token(token) is None


def test_token_signed_with_another_key_is_rejected():
    token = jwt.encode(
        {"user_id": "user-1", "role": "admin"}, "another-key", algorithm=settings.JWT_ALGORITHM
    )
    assert decode_access_token(token) is None


def test_token_without_user_id_is_rejected():
    token = jwt.encode({"sub": "x"}, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
    assert decode_access_token(token) is None


def test_garbage_token_is_rejected():
    assert decode_access_token("not.a.token") is None
