"""
Domain models for the Task Hub service.

Defines the in-memory records for users and tasks, along with the
enumerations used for task status, task priority and user role.  Records
are plain dataclasses owned by the stores in :mod:`taskhub.repositories`;
they are never written anywhere durable.

Key Concepts:
- ``str, Enum`` inheritance for JSON-friendly enumeration values
- Timezone-aware datetime handling (UTC normalisation)
- Serialisation helpers (``to_dict``) for JSON API responses
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class TaskStatus(str, Enum):
    """
    Enumeration of task lifecycle statuses.

    The intended flow is TODO -> IN_PROGRESS -> DONE, with CANCELLED
    reachable from anywhere, but transitions are not enforced: any member
    may replace any other.
    """

    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"
    CANCELLED = "CANCELLED"


class TaskPriority(str, Enum):
    """Enumeration of task priority levels."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class Role(str, Enum):
    """Roles a caller may present through the identity headers."""

    USER = "USER"
    ADMIN = "ADMIN"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_utc_iso(value: datetime | None) -> str | None:
    """
    Convert a datetime to a UTC ISO-8601 string.

    Naive datetimes are assumed to already be UTC and get their ``tzinfo``
    attached; aware datetimes are converted to UTC before formatting.

    Args:
        value: A datetime instance, or ``None``.

    Returns:
        An ISO-8601 formatted string in UTC, or ``None`` if the input was
        ``None``.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    return value.isoformat()


@dataclass
class Task:
    """
    Task owned by a single user.

    Attributes:
        id: Opaque unique identifier (UUID4 string).
        title: Trimmed summary of the task (3-100 characters).
        owner_id: Identifier of the owning user.
        description: Optional trimmed details (max 500 characters).
        status: Current lifecycle status (see ``TaskStatus``).
        priority: Importance level (see ``TaskPriority``).
        deadline: Optional timezone-aware deadline.
        created_at: Timestamp of task creation (UTC).
    """

    id: str
    title: str
    owner_id: str
    description: str | None = None
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    deadline: datetime | None = None
    created_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict[str, Any]:
        """
        Serialise the task to a JSON-safe dictionary.

        Returns:
            A dictionary containing all task fields with datetime values
            converted to UTC ISO-8601 strings and enums to their values.
        """
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": TaskStatus(self.status).value,
            "priority": TaskPriority(self.priority).value,
            "deadline": to_utc_iso(self.deadline),
            "owner_id": self.owner_id,
            "created_at": to_utc_iso(self.created_at),
        }

    def __repr__(self) -> str:
        return f"<Task {self.id}: {self.title}>"


@dataclass
class User:
    """
    Registered user.

    Only a one-way hash of the password is kept, and ``to_dict`` omits it
    so the output can be returned directly in API responses.

    Attributes:
        id: Opaque unique identifier (UUID4 string).
        email: Unique, normalised (stripped, lower-cased) email address.
        password_hash: Werkzeug-generated hash of the user's password.
        role: Privilege level (see ``Role``).
        created_at: Timestamp of account creation (UTC).
    """

    id: str
    email: str
    password_hash: str
    role: Role = Role.USER
    created_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "role": Role(self.role).value,
            "created_at": to_utc_iso(self.created_at),
        }

    def __repr__(self) -> str:
        return f"<User {self.id}: {self.email}>"
