"""
Service layer for the Task Hub application.

- tasks: task lifecycle coordination (validation, caching, transactions)
- users: registration, login and profile lookup
"""

from .tasks import TaskService
from .users import UserService

__all__ = ["TaskService", "UserService"]
