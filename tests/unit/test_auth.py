"""Unit tests for bearer token validation."""

import uuid
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from clausewise.auth import CurrentUser, decode_access_token
from conftest import JWT_SECRET, make_token


def test_valid_token_yields_user_and_email(settings):
    user_id = uuid.uuid4()

    decoded_id, email = decode_access_token(make_token(user_id, "a@example.com"), settings)

    assert decoded_id == user_id
    assert email == "a@example.com"


def test_expired_token_is_rejected(settings):
    with pytest.raises(jwt.ExpiredSignatureError):
        decode_access_token(make_token(uuid.uuid4(), expires_in=-10), settings)


def test_wrong_secret_is_rejected(settings):
    token = jwt.encode(
        {"sub": str(uuid.uuid4()), "aud": "authenticated",
         "exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
        "some-other-secret-that-is-long-enough-for-hs256",
        algorithm="HS256",
    )
    with pytest.raises(jwt.InvalidSignatureError):
        decode_access_token(token, settings)


def test_non_uuid_subject_is_rejected(settings):
    token = jwt.encode(
        {"sub": "service-account", "aud": "authenticated",
         "exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
        JWT_SECRET,
        algorithm="HS256",
    )
    with pytest.raises(jwt.InvalidTokenError):
        decode_access_token(token, settings)


def test_role_flags():
    admin = CurrentUser(id=uuid.uuid4(), roles=frozenset({"admin"}))
    operator = CurrentUser(id=uuid.uuid4(), roles=frozenset({"operator"}))
    plain = CurrentUser(id=uuid.uuid4())

    assert admin.is_admin and admin.is_operator
    assert operator.is_operator and not operator.is_admin
    assert not plain.is_operator and not plain.is_admin
