"""
JWT issuance and verification for login tokens.

Tokens are signed with HS256 using the application's ``JWT_SECRET_KEY``.

Token structure (claims):
    - ``user_id`` -- identifier of the authenticated user.
    - ``role``    -- the user's role at the time of login.
    - ``iat``     -- *issued-at* timestamp (UTC epoch seconds).
    - ``exp``     -- *expiration* timestamp (UTC epoch seconds).
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from .errors import UnauthorizedError
from .models import Role

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
REQUIRED_TOKEN_CLAIMS = ["user_id", "role", "iat", "exp"]


def create_token(
    user_id: str,
    role: Role,
    secret_key: str,
    expiry_hours: int,
) -> str:
    """
    Create an HS256-signed JWT containing the caller's identity.

    Args:
        user_id: Identifier of the authenticated user.  Must be non-empty.
        role: Role to embed in the token.
        secret_key: HMAC key used to sign the token.
        expiry_hours: Number of hours from *now* until the token expires.

    Returns:
        A compact JWS string suitable for use as a Bearer token.

    Raises:
        ValueError: If *user_id* is blank.
    """
    if not isinstance(user_id, str) or not user_id.strip():
        raise ValueError("user_id must be a non-empty string")

    logger.info("Generating JWT token for user %s", user_id)
    now = datetime.now(timezone.utc)
    expires_at = now + timedelta(hours=int(expiry_hours))

    payload: dict[str, Any] = {
        "user_id": user_id,
        "role": Role(role).value,
        "iat": int(now.timestamp()),
        "exp": int(expires_at.timestamp()),
    }
    return jwt.encode(payload, secret_key, algorithm=ALGORITHM)


def verify_token(token: str, secret_key: str, leeway: int = 30) -> dict[str, Any]:
    """
    Decode and validate a JWT, returning the payload on success.

    Performs signature, expiry and required-claim checks, then validates that
    ``user_id`` is a non-empty string and ``role`` a known role.

    Raises:
        UnauthorizedError: If the token fails any check.
    """
    try:
        payload = jwt.decode(
            token,
            secret_key,
            algorithms=[ALGORITHM],
            options={"require": REQUIRED_TOKEN_CLAIMS},
            leeway=leeway,
        )
    except jwt.InvalidTokenError as exc:
        logger.error("Token verification failed: %s", exc)
        raise UnauthorizedError("Invalid or expired token") from exc

    user_id = payload.get("user_id")
    if not isinstance(user_id, str) or not user_id.strip():
        raise UnauthorizedError("Invalid or expired token")
    if payload.get("role") not in {r.value for r in Role}:
        raise UnauthorizedError("Invalid or expired token")
    return payload
