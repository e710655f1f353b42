"""
Routes package for the Task Hub application.

This package contains route blueprints:
- tasks: task CRUD, bulk deletion and the health check
- users: registration, login, profile and token verification
"""

from __future__ import annotations

from typing import Any

from flask import request

from ..errors import ValidationError


def json_body() -> dict[str, Any]:
    """
    Return the request's JSON object body.

    Raises:
        ValidationError: If the body is missing, not JSON, or not an object.
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data
