"""
Request identity helpers for the Task Hub API.

The caller's identity arrives in two request headers, ``x-user-id`` and
``x-role``.  ``require_identity`` reads them before a view runs and stores
the result on ``flask.g`` so it lives exactly as long as the request.

Key Concepts:
- Decorator pattern for endpoint authentication (``require_identity``)
- Using ``flask.g`` to store request-scoped user identity
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from functools import wraps

from flask import g, request

from .errors import ForbiddenError, UnauthorizedError
from .models import Role

logger = logging.getLogger(__name__)

USER_ID_HEADER = "x-user-id"
ROLE_HEADER = "x-role"


@dataclass(frozen=True)
class Identity:
    """Authenticated caller for the current request."""

    user_id: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


def extract_identity(headers: Mapping[str, str]) -> Identity:
    """
    Build an :class:`Identity` from request headers.

    Raises:
        UnauthorizedError: If either header is missing or blank, or the role
            is not one of the known roles.
    """
    user_id = (headers.get(USER_ID_HEADER) or "").strip()
    role = (headers.get(ROLE_HEADER) or "").strip()

    if not user_id or not role:
        logger.error("Missing authentication headers")
        raise UnauthorizedError("Authentication required")

    try:
        identity = Identity(user_id=user_id, role=Role(role.upper()))
    except ValueError as exc:
        logger.error("Unknown role in authentication headers: %s", role)
        raise UnauthorizedError("Authentication required") from exc

    logger.debug("Auth context set: userId=%s, role=%s", identity.user_id, identity.role.value)
    return identity


def current_identity() -> Identity:
    """Return the identity stored by ``require_identity`` for this request."""
    identity = g.get("identity")
    if identity is None:
        raise UnauthorizedError("Authentication context not available")
    return identity


def require_admin(identity: Identity) -> None:
    if not identity.is_admin:
        raise ForbiddenError("Admin role required")


def require_identity(view_func: Callable):
    """
    Decorator that enforces header-based identity on API endpoints.

    On success the identity is available as ``g.identity`` (or through
    ``current_identity()``); otherwise ``UnauthorizedError`` propagates to
    the application error handler before the view runs.
    """

    @wraps(view_func)
    def wrapper(*args, **kwargs):
        g.identity = extract_identity(request.headers)
        return view_func(*args, **kwargs)

    return wrapper
