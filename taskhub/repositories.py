"""
In-memory stores for tasks and users.

Each store owns a plain list of records for the lifetime of the process.
Lookups return the stored objects themselves, ``None`` stands in for "not
found", and nothing is written to disk.
"""

from __future__ import annotations

import dataclasses
import logging
import re
from collections.abc import Iterable
from typing import Any

from .models import Task, User

logger = logging.getLogger(__name__)

# Words are compared on this many leading letters, so "write" and "writing"
# count as the same word when looking for similar titles.
TITLE_WORD_STEM_LENGTH = 4

_WORD_RE = re.compile(r"\w+")


def _title_stems(title: str) -> set[str]:
    return {word[:TITLE_WORD_STEM_LENGTH] for word in _WORD_RE.findall(title.lower())}


class TaskStore:
    """Owns every task record."""

    def __init__(self) -> None:
        self._tasks: list[Task] = []

    def save(self, task: Task) -> Task:
        logger.info("Saving task %s", task.id)
        self._tasks.append(task)
        return task

    def delete(self, task_id: str) -> None:
        logger.info("Deleting task %s", task_id)
        self._tasks = [t for t in self._tasks if t.id != task_id]

    def find_by_id(self, task_id: str) -> Task | None:
        logger.debug("Finding task by id %s", task_id)
        return next((t for t in self._tasks if t.id == task_id), None)

    def update(self, task_id: str, fields: dict[str, Any]) -> Task | None:
        """
        Merge *fields* into the task with *task_id*.

        The merged record replaces the stored one, so references obtained
        before the update keep their old values.

        Returns:
            The merged task, or ``None`` when no task has *task_id*.
        """
        logger.info("Updating task %s", task_id)
        for index, task in enumerate(self._tasks):
            if task.id == task_id:
                merged = dataclasses.replace(task, **fields)
                self._tasks[index] = merged
                return merged
        return None

    def find_by_owner_and_title_pattern(
        self, owner_id: str, pattern: str, exclude_id: str | None = None
    ) -> list[Task]:
        """Return the owner's tasks whose title contains *pattern*, ignoring case."""
        logger.debug("Finding tasks for owner %s matching title %r", owner_id, pattern)
        needle = pattern.lower()
        return [
            t
            for t in self._tasks
            if t.owner_id == owner_id
            and needle in t.title.lower()
            and (not exclude_id or t.id != exclude_id)
        ]

    def find_similar_titles(
        self, owner_id: str, title: str, exclude_id: str | None = None
    ) -> list[Task]:
        """
        Return the owner's tasks whose title approximately matches *title*.

        A task matches when its title contains *title* (see
        ``find_by_owner_and_title_pattern``) or when every word of *title*
        shares its leading letters with some word of the task's title, so
        reordered or inflected titles ("report writing" against
        "Write report") are caught too.
        """
        matches = self.find_by_owner_and_title_pattern(owner_id, title, exclude_id)
        seen = {t.id for t in matches}
        candidate = _title_stems(title)
        if not candidate:
            return matches

        for task in self.find_by_owner(owner_id):
            if task.id in seen or (exclude_id and task.id == exclude_id):
                continue
            if candidate <= _title_stems(task.title):
                matches.append(task)
                seen.add(task.id)
        return matches

    def find_by_owner(self, owner_id: str) -> list[Task]:
        logger.debug("Finding all tasks for owner: %s", owner_id)
        return [t for t in self._tasks if t.owner_id == owner_id]

    def delete_by_owner(self, owner_id: str) -> int:
        before = len(self._tasks)
        self._tasks = [t for t in self._tasks if t.owner_id != owner_id]
        deleted = before - len(self._tasks)
        logger.info("Deleted %s tasks for owner: %s", deleted, owner_id)
        return deleted

    def delete_multiple(self, ids: Iterable[str]) -> int:
        targets = set(ids)
        before = len(self._tasks)
        self._tasks = [t for t in self._tasks if t.id not in targets]
        deleted = before - len(self._tasks)
        logger.info("Deleted %s of %s requested tasks", deleted, len(targets))
        return deleted

    def count(self) -> int:
        return len(self._tasks)

    def __len__(self) -> int:
        return self.count()


class UserStore:
    """Owns every registered user."""

    def __init__(self) -> None:
        self._users: list[User] = []

    def save(self, user: User) -> User:
        logger.info("Saving user %s", user.id)
        self._users.append(user)
        return user

    def find_by_id(self, user_id: str) -> User | None:
        logger.debug("Finding user by id %s", user_id)
        return next((u for u in self._users if u.id == user_id), None)

    def find_by_email(self, email: str) -> User | None:
        logger.debug("Finding user by email")
        return next((u for u in self._users if u.email == email), None)

    def __len__(self) -> int:
        return len(self._users)
