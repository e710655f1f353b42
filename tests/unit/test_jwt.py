"""
Unit tests for JWT issuance and verification.

Key Concepts:
- Negative testing: expired, tampered, wrongly signed and incomplete tokens
- Claim validation on top of PyJWT's signature and expiry checks
"""

from __future__ import annotations

import pytest

from taskhub.errors import UnauthorizedError
from taskhub.jwt import create_token, verify_token
from taskhub.models import Role
from tests.helpers import create_test_token

pytestmark = pytest.mark.unit

SECRET = "unit-test-secret-key-that-is-long-enough"


def test_create_token_round_trips_identity():
    token = create_token("user-42", Role.ADMIN, SECRET, expiry_hours=1)

    payload = verify_token(token, SECRET)

    assert payload["user_id"] == "user-42"
    assert payload["role"] == "ADMIN"
    assert payload["exp"] - payload["iat"] == 3600


@pytest.mark.parametrize("user_id", ["", "   "])
def test_create_token_rejects_blank_user_id(user_id):
    with pytest.raises(ValueError):
        create_token(user_id, Role.USER, SECRET, expiry_hours=1)


def test_expired_token_rejected():
    token = create_test_token(SECRET, expired=True)

    with pytest.raises(UnauthorizedError, match="Invalid or expired token"):
        verify_token(token, SECRET)


def test_token_signed_with_other_secret_rejected():
    token = create_test_token("some-other-secret-key-that-is-long")

    with pytest.raises(UnauthorizedError):
        verify_token(token, SECRET)


def test_tampered_token_rejected():
    # Arrange
    token = create_test_token(SECRET)
    header, payload, signature = token.split(".")
    tampered = ".".join([header, payload, signature[::-1]])

    # Act / Assert
    with pytest.raises(UnauthorizedError):
        verify_token(tampered, SECRET)


def test_garbage_token_rejected():
    with pytest.raises(UnauthorizedError):
        verify_token("not.a.jwt", SECRET)


@pytest.mark.parametrize("claim", ["user_id", "role", "exp", "iat"])
def test_missing_required_claim_rejected(claim):
    token = create_test_token(SECRET, **{claim: None})

    with pytest.raises(UnauthorizedError):
        verify_token(token, SECRET)


def test_unknown_role_claim_rejected():
    token = create_test_token(SECRET, role="SUPERUSER")

    with pytest.raises(UnauthorizedError):
        verify_token(token, SECRET)


def test_blank_user_id_claim_rejected():
    token = create_test_token(SECRET, user_id="  ")

    with pytest.raises(UnauthorizedError):
        verify_token(token, SECRET)
