"""
Input shapes for the service layer.

Route handlers copy request fields into these dataclasses without checking
them; the services own all validation, so values arrive here exactly as the
client sent them.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any

from .models import Role


@dataclass
class CreateTaskDTO:
    title: Any
    owner_id: str
    description: Any = None
    deadline: datetime | str | None = None
    priority: Any = None


@dataclass
class UpdateTaskDTO:
    """Partial update; ``None`` means "leave unchanged"."""

    title: Any = None
    description: Any = None
    status: Any = None
    deadline: datetime | str | None = None
    priority: Any = None

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> UpdateTaskDTO:
        """Build an update from the known keys of *data*, ignoring the rest."""
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))


@dataclass
class CreateUserDTO:
    email: Any
    password: Any
    role: Role | None = None


@dataclass
class LoginDTO:
    email: Any
    password: Any
