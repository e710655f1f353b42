"""Test helper functions and doubles shared across the suites."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from taskhub.models import Role


class FakeClock:
    """Manually advanced monotonic clock for cache expiry tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def identity_headers(user_id: str, role: Role | str = Role.USER) -> dict[str, str]:
    """Build JSON API headers carrying the caller identity."""
    return {
        "x-user-id": user_id,
        "x-role": Role(role).value if isinstance(role, Role) else role,
        "Content-Type": "application/json",
        "Accept": "application/json",
    }


def create_test_token(
    secret: str,
    user_id: str = "user-1",
    role: str = Role.USER.value,
    expired: bool = False,
    algorithm: str = "HS256",
    **overrides: Any,
) -> str:
    """Create a signed test token with the required claims."""
    now = datetime.now(timezone.utc)
    expiry_time = now - timedelta(hours=1) if expired else now + timedelta(hours=1)

    payload: dict[str, Any] = {
        "user_id": user_id,
        "role": role,
        "iat": int(now.timestamp()),
        "exp": int(expiry_time.timestamp()),
    }
    payload.update(overrides)
    payload = {key: value for key, value in payload.items() if value is not None}
    return jwt.encode(payload, secret, algorithm=algorithm)
