"""
Account API endpoints.

Mounted under ``/api/auth`` by the application factory.

Endpoints:
    POST /register  -- Create a new user account.
    POST /login     -- Authenticate and receive a JWT.
    GET  /profile   -- Return the caller's account (identity headers).
    GET  /verify    -- Validate a Bearer token and return its identity claims.
"""

from __future__ import annotations

import logging

from flask import Blueprint, Response, current_app, jsonify, request

from .. import get_services
from ..auth import current_identity, require_identity
from ..dtos import CreateUserDTO, LoginDTO
from ..errors import UnauthorizedError
from ..jwt import verify_token
from . import json_body

logger = logging.getLogger(__name__)

users_bp = Blueprint("users_api", __name__)


def _extract_bearer_token() -> str | None:
    """
    Extract the Bearer token from the current request's Authorization header.

    Returns:
        The raw JWT string, or ``None`` if no valid Bearer token is present.
    """
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith("Bearer "):
        return None
    token = auth_header[7:].strip()
    return token or None


@users_bp.route("/register", methods=["POST"])
def register() -> tuple[Response, int]:
    """
    Register a new user account.

    Expects a JSON body with ``email`` and ``password``.  New accounts
    always get the USER role.

    Returns:
        201 with the created user on success, 400 on invalid input or a
        duplicate email.
    """
    data = json_body()
    user = get_services().users.create_user(
        CreateUserDTO(email=data.get("email"), password=data.get("password"))
    )
    logger.info("Registered user %s", user.id)
    return jsonify(user.to_dict()), 201


@users_bp.route("/login", methods=["POST"])
def login() -> tuple[Response, int]:
    """
    Authenticate a user and issue a JWT.

    Returns:
        200 with ``token`` on success, 400 if fields are missing, 401 if
        the credentials are incorrect.
    """
    data = json_body()
    token = get_services().users.authenticate(
        LoginDTO(email=data.get("email"), password=data.get("password"))
    )
    return jsonify({"token": token}), 200


@users_bp.route("/profile", methods=["GET"])
@require_identity
def profile() -> tuple[Response, int]:
    """Return the account named by the identity headers, or 404."""
    user = get_services().users.get_by_id(current_identity().user_id)
    return jsonify(user.to_dict()), 200


@users_bp.route("/verify", methods=["GET"])
def verify() -> tuple[Response, int]:
    """
    Verify a Bearer JWT and return the embedded identity claims.

    Returns:
        200 with ``user_id`` and ``role`` if the token is valid, 401 if
        the Authorization header is missing or the token is invalid or
        expired.
    """
    token = _extract_bearer_token()
    if token is None:
        raise UnauthorizedError("Missing or invalid Authorization header")

    payload = verify_token(
        token,
        current_app.config["JWT_SECRET_KEY"],
        leeway=current_app.config.get("JWT_CLOCK_SKEW_SECONDS", 30),
    )
    return jsonify({"user_id": payload["user_id"], "role": payload["role"]}), 200
