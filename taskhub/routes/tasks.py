"""
REST API Endpoints for tasks.

Every task endpoint requires the ``x-user-id`` / ``x-role`` identity headers
(via the ``require_identity`` decorator).  Handlers only translate between
HTTP and :class:`~taskhub.services.tasks.TaskService`; validation, caching
and transaction handling live in the service, and errors propagate to the
application error handlers.

Endpoints:
    GET    /api/health                      - Service health check (public)
    GET    /api/tasks                       - List the caller's tasks
    POST   /api/tasks                       - Create a task owned by the caller
    GET    /api/tasks/<id>                  - Retrieve a single task
    PUT    /api/tasks/<id>                  - Partial update of a task
    DELETE /api/tasks/<id>                  - Delete a task (ADMIN only)
    DELETE /api/tasks/owner                 - Delete all of the caller's tasks
    DELETE /api/tasks/owner/<user_id>       - Delete a user's tasks (self or ADMIN)
    POST   /api/tasks/delete-multiple       - Delete several tasks by id
"""

from __future__ import annotations

import logging
import os

from flask import Blueprint, Response, jsonify

from .. import get_services
from ..auth import current_identity, require_admin, require_identity
from ..dtos import CreateTaskDTO, UpdateTaskDTO
from ..errors import ForbiddenError, ValidationError
from . import json_body

logger = logging.getLogger(__name__)

tasks_bp = Blueprint("tasks_api", __name__)


def _deleted_response(deleted_count: int) -> tuple[Response, int]:
    return (
        jsonify(
            {
                "deleted_count": deleted_count,
                "message": f"Deleted {deleted_count} tasks",
            }
        ),
        200,
    )


# =====================================================================
# API Endpoints
# =====================================================================


@tasks_bp.route("/health", methods=["GET"])
def health_check() -> tuple[Response, int]:
    """
    Return service health status.

    This endpoint is public (no identity required) and is intended for
    load-balancer and orchestrator liveness probes.
    """
    return (
        jsonify(
            {
                "status": "healthy",
                "service": "taskhub",
                "environment": os.getenv("ENVIRONMENT", "unknown"),
            }
        ),
        200,
    )


@tasks_bp.route("/tasks", methods=["GET"])
@require_identity
def list_tasks() -> tuple[Response, int]:
    """
    List all tasks owned by the caller.

    Returns:
        JSON object with a ``tasks`` array and a ``count`` of results.
    """
    identity = current_identity()
    logger.info("GET /api/tasks - Fetching tasks for user_id=%s", identity.user_id)

    tasks = get_services().tasks.get_by_owner(identity.user_id)
    return jsonify({"tasks": [task.to_dict() for task in tasks], "count": len(tasks)}), 200


@tasks_bp.route("/tasks", methods=["POST"])
@require_identity
def create_task() -> tuple[Response, int]:
    """
    Create a new task owned by the caller.

    Expects a JSON body with a ``title``.  Optional fields are
    ``description``, ``deadline`` (ISO-8601) and ``priority``.

    Returns:
        JSON representation of the newly created task with a 201 status.
    """
    data = json_body()
    if not data.get("title"):
        raise ValidationError("Title required")

    dto = CreateTaskDTO(
        title=data["title"],
        owner_id=current_identity().user_id,
        description=data.get("description"),
        deadline=data.get("deadline"),
        priority=data.get("priority"),
    )
    task = get_services().tasks.create(dto)
    return jsonify(task.to_dict()), 201


@tasks_bp.route("/tasks/<task_id>", methods=["GET"])
@require_identity
def get_task(task_id: str) -> tuple[Response, int]:
    """Retrieve a single task by id, or 404."""
    task = get_services().tasks.get_by_id(task_id)
    return jsonify(task.to_dict()), 200


@tasks_bp.route("/tasks/<task_id>", methods=["PUT"])
@require_identity
def update_task(task_id: str) -> tuple[Response, int]:
    """
    Update an existing task.

    Only the fields present in the JSON body are modified; at least one of
    ``title``, ``description``, ``status``, ``deadline`` or ``priority`` is
    required.

    Returns:
        JSON representation of the updated task, or 404/400 on error.
    """
    dto = UpdateTaskDTO.from_mapping(json_body())
    if dto.is_empty():
        raise ValidationError(
            "At least one field (title, description, status, deadline, or priority) required"
        )

    task = get_services().tasks.update(task_id, dto)
    return jsonify(task.to_dict()), 200


@tasks_bp.route("/tasks/<task_id>", methods=["DELETE"])
@require_identity
def delete_task(task_id: str) -> tuple[Response, int]:
    """Delete a task by id.  Requires the ADMIN role; unknown ids still return 204."""
    require_admin(current_identity())
    get_services().tasks.delete(task_id)
    return Response(status=204), 204


@tasks_bp.route("/tasks/owner", methods=["DELETE"])
@tasks_bp.route("/tasks/owner/<user_id>", methods=["DELETE"])
@require_identity
def delete_tasks_by_owner(user_id: str | None = None) -> tuple[Response, int]:
    """
    Delete every task of a user.

    Without ``user_id`` the caller's own tasks are deleted.  Deleting
    another user's tasks requires the ADMIN role.
    """
    identity = current_identity()
    target_user_id = user_id or identity.user_id
    if target_user_id != identity.user_id and not identity.is_admin:
        raise ForbiddenError("You can only delete your own tasks")

    deleted = get_services().tasks.delete_by_owner(target_user_id)
    return _deleted_response(deleted)


@tasks_bp.route("/tasks/delete-multiple", methods=["POST"])
@require_identity
def delete_multiple_tasks() -> tuple[Response, int]:
    """
    Delete several tasks by id.

    Request Body (JSON):
        ids: Non-empty array of task ids.
    """
    ids = json_body().get("ids")
    if (
        not isinstance(ids, list)
        or not ids
        or not all(isinstance(task_id, str) for task_id in ids)
    ):
        raise ValidationError("ids must be a non-empty array")

    deleted = get_services().tasks.delete_multiple(ids)
    return _deleted_response(deleted)
