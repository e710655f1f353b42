"""
Task lifecycle coordination.

``TaskService`` sequences every task operation: field validation, owner and
duplicate-title checks, persistence in the :class:`~taskhub.repositories.TaskStore`,
cache maintenance and transaction bookkeeping.  Errors are raised where they
are detected and re-raised unchanged after logging, so the HTTP layer is the
only place they are turned into responses.

Cache keys:
    ``task:<id>``             -- a single task, filled by ``get_by_id``.
    ``tasks:owner:<owner>``   -- an owner's task list, filled by ``get_by_owner``.

The owner list entry is only dropped by expiry or by the full clear in
``delete_by_owner``; single-task writes leave it in place.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Sequence
from datetime import datetime, timezone
from typing import Any

from ..cache import TTLCache
from ..dtos import CreateTaskDTO, UpdateTaskDTO
from ..errors import NotFoundError, ValidationError
from ..models import Task, TaskPriority, TaskStatus, utcnow
from ..repositories import TaskStore, UserStore
from ..transactions import TransactionLog

logger = logging.getLogger(__name__)

TITLE_MIN_LENGTH = 3
TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500
DEADLINE_MAX_YEARS = 5

VALID_PRIORITIES = [p.value for p in TaskPriority]
VALID_STATUSES = [s.value for s in TaskStatus]


def task_cache_key(task_id: str) -> str:
    return f"task:{task_id}"


def owner_cache_key(owner_id: str) -> str:
    return f"tasks:owner:{owner_id}"


def add_years(value: datetime, years: int) -> datetime:
    """Shift *value* by whole calendar years; 29 February rolls over to 1 March."""
    try:
        return value.replace(year=value.year + years)
    except ValueError:
        return value.replace(year=value.year + years, month=3, day=1)


def parse_deadline(value: datetime | str) -> datetime:
    """
    Parse a deadline into a timezone-aware UTC datetime.

    Accepts a ``datetime`` or an ISO-8601 string (a trailing ``Z`` is
    allowed).  Naive values are assumed to be UTC.  Offsets that move the
    value outside the representable range are rejected like malformed input.

    Raises:
        ValidationError: If *value* is not a recognisable timestamp.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError as exc:
            raise ValidationError("Invalid deadline date format") from exc
    else:
        raise ValidationError("Invalid deadline date format")

    try:
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)
    except (OverflowError, ValueError) as exc:
        raise ValidationError("Invalid deadline date format") from exc


class TaskService:
    """
    Coordinator for task creation, updates, deletion and cached reads.

    Args:
        task_store: Owner of the task records.
        user_store: Consulted for owner existence checks.
        cache: Read-through cache for single tasks and owner lists.
        transactions: Marks each multi-step mutation.  Rolling back does
            not undo store writes that already happened.
        clock: Returns the current aware UTC time; used for deadline
            checks and ``created_at``.
    """

    def __init__(
        self,
        task_store: TaskStore,
        user_store: UserStore,
        cache: TTLCache,
        transactions: TransactionLog,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.task_store = task_store
        self.user_store = user_store
        self.cache = cache
        self.transactions = transactions
        self._clock = clock

    # -----------------------------------------------------------------
    # Validation
    # -----------------------------------------------------------------

    def _validate_title(self, title: Any) -> None:
        if not isinstance(title, str) or not title:
            raise ValidationError("Title is required")
        if len(title.strip()) < TITLE_MIN_LENGTH:
            raise ValidationError(
                f"Title must be at least {TITLE_MIN_LENGTH} characters long"
            )
        if len(title) > TITLE_MAX_LENGTH:
            raise ValidationError(
                f"Title must not exceed {TITLE_MAX_LENGTH} characters"
            )

    def _validate_description(self, description: Any) -> None:
        if not isinstance(description, str):
            raise ValidationError("Description must be a string")
        if len(description) > DESCRIPTION_MAX_LENGTH:
            raise ValidationError(
                f"Description must not exceed {DESCRIPTION_MAX_LENGTH} characters"
            )

    def _validate_deadline(self, deadline: datetime | str) -> datetime:
        parsed = parse_deadline(deadline)
        now = self._clock()
        if parsed <= now:
            raise ValidationError("Deadline cannot be in the past")
        if parsed > add_years(now, DEADLINE_MAX_YEARS):
            raise ValidationError(
                f"Deadline cannot be more than {DEADLINE_MAX_YEARS} years in the future"
            )
        return parsed

    def _validate_priority(self, priority: Any) -> None:
        if priority not in VALID_PRIORITIES:
            raise ValidationError("Priority must be LOW, MEDIUM, or HIGH")

    def _validate_status(self, status: Any) -> None:
        if status not in VALID_STATUSES:
            raise ValidationError(
                "Status must be TODO, IN_PROGRESS, DONE, or CANCELLED"
            )

    def _ensure_owner_exists(self, owner_id: str) -> None:
        if self.user_store.find_by_id(owner_id) is None:
            raise NotFoundError("Owner not found")

    def _ensure_unique_title(
        self, owner_id: str, title: str, exclude_id: str | None = None
    ) -> None:
        similar = self.task_store.find_similar_titles(owner_id, title, exclude_id)
        if similar:
            substring_matches = self.task_store.find_by_owner_and_title_pattern(
                owner_id, title, exclude_id
            )
            rule = "title substring" if substring_matches else "word-stem match"
            logger.info(
                "Rejecting title %r: %s against %s existing task(s)",
                title,
                rule,
                len(similar),
            )
            raise ValidationError(
                "A task with similar title already exists for this user"
            )

    # -----------------------------------------------------------------
    # Mutations
    # -----------------------------------------------------------------

    def create(self, dto: CreateTaskDTO) -> Task:
        """
        Validate and persist a new task for ``dto.owner_id``.

        Empty ``deadline`` and ``priority`` values count as absent.

        Raises:
            ValidationError: If a field is invalid or a similar title exists.
            NotFoundError: If the owner does not exist.
        """
        logger.info("Entering create task")
        logger.debug("Creating task with title: %s", dto.title)

        try:
            self._validate_title(dto.title)
            if dto.description is not None:
                self._validate_description(dto.description)
            deadline = None
            if dto.deadline:
                deadline = self._validate_deadline(dto.deadline)
            if dto.priority:
                self._validate_priority(dto.priority)

            self.transactions.begin()
            try:
                self._ensure_owner_exists(dto.owner_id)
                title = dto.title.strip()
                self._ensure_unique_title(dto.owner_id, title)

                task = Task(
                    id=str(uuid.uuid4()),
                    title=title,
                    description=dto.description.strip() if dto.description is not None else None,
                    status=TaskStatus.TODO,
                    deadline=deadline,
                    priority=TaskPriority(dto.priority or TaskPriority.MEDIUM.value),
                    owner_id=dto.owner_id,
                    created_at=self._clock(),
                )
                saved = self.task_store.save(task)

                self.transactions.commit()
            except Exception:
                self.transactions.rollback()
                raise

            logger.info("Task created successfully: %s", saved.id)
            return saved
        except Exception as exc:
            logger.error("Error creating task: %s", exc)
            raise

    def update(self, task_id: str, dto: UpdateTaskDTO) -> Task:
        """
        Apply the fields present in *dto* to an existing task.

        Status changes are checked against the allowed values only; any
        status may follow any other.  Empty ``deadline``, ``priority`` and
        ``status`` values leave the field unchanged.

        Raises:
            ValidationError: If a field is invalid or the new title is
                similar to another of the owner's tasks.
            NotFoundError: If the task does not exist.
        """
        logger.info("Entering update task")
        logger.debug("Updating task with id: %s", task_id)

        try:
            if dto.title is not None:
                self._validate_title(dto.title)
            if dto.description is not None:
                self._validate_description(dto.description)
            deadline = None
            if dto.deadline:
                deadline = self._validate_deadline(dto.deadline)
            if dto.priority:
                self._validate_priority(dto.priority)
            if dto.status:
                self._validate_status(dto.status)

            self.transactions.begin()
            try:
                existing = self.task_store.find_by_id(task_id)
                if existing is None:
                    raise NotFoundError("Task not found")

                changes: dict[str, Any] = {}
                if dto.title is not None:
                    changes["title"] = dto.title.strip()
                    self._ensure_unique_title(
                        existing.owner_id, changes["title"], exclude_id=task_id
                    )
                if dto.description is not None:
                    changes["description"] = dto.description.strip()
                if dto.status:
                    changes["status"] = TaskStatus(dto.status)
                if deadline is not None:
                    changes["deadline"] = deadline
                if dto.priority:
                    changes["priority"] = TaskPriority(dto.priority)

                updated = self.task_store.update(task_id, changes)
                if updated is None:
                    raise NotFoundError("Task not found")

                self.cache.invalidate(task_cache_key(task_id))
                self.transactions.commit()
            except Exception:
                self.transactions.rollback()
                raise

            logger.info("Task updated successfully: %s", task_id)
            return updated
        except Exception as exc:
            logger.error("Error updating task: %s", exc)
            raise

    def delete(self, task_id: str) -> None:
        """Remove a task if it exists; unknown ids are ignored."""
        logger.info("Entering delete task")
        logger.debug("Deleting task with id: %s", task_id)

        self.task_store.delete(task_id)
        self.cache.invalidate(task_cache_key(task_id))

    def delete_by_owner(self, owner_id: str) -> int:
        """
        Remove every task owned by *owner_id* and clear the whole cache.

        Returns:
            Number of tasks removed.

        Raises:
            NotFoundError: If the owner does not exist.
        """
        logger.info("Entering delete_by_owner")
        logger.debug("Deleting all tasks for user: %s", owner_id)

        try:
            self._ensure_owner_exists(owner_id)

            self.transactions.begin()
            try:
                deleted = self.task_store.delete_by_owner(owner_id)
                self.cache.clear()
                self.transactions.commit()
            except Exception:
                self.transactions.rollback()
                raise

            logger.info("Successfully deleted %s tasks for user: %s", deleted, owner_id)
            return deleted
        except Exception as exc:
            logger.error("Error deleting tasks by owner: %s", exc)
            raise

    def delete_multiple(self, ids: Sequence[str]) -> int:
        """
        Remove every task whose id is in *ids*.

        Returns:
            Number of tasks actually removed; unknown ids are skipped.

        Raises:
            ValidationError: If *ids* is empty.
        """
        logger.info("Entering delete_multiple")

        try:
            if not ids:
                raise ValidationError("At least one task ID required")
            logger.debug("Deleting %s tasks", len(ids))

            self.transactions.begin()
            try:
                deleted = self.task_store.delete_multiple(ids)
                for task_id in ids:
                    self.cache.invalidate(task_cache_key(task_id))
                self.transactions.commit()
            except Exception:
                self.transactions.rollback()
                raise

            logger.info("Successfully deleted %s tasks", deleted)
            return deleted
        except Exception as exc:
            logger.error("Error deleting multiple tasks: %s", exc)
            raise

    # -----------------------------------------------------------------
    # Reads
    # -----------------------------------------------------------------

    def get_by_id(self, task_id: str) -> Task:
        """
        Return a task, serving it from the cache when possible.

        Raises:
            NotFoundError: If the task does not exist.  Misses are not cached.
        """
        logger.info("Entering get_by_id task")
        key = task_cache_key(task_id)

        cached = self.cache.get(key)
        if cached is not None:
            logger.info("Returning task from cache")
            return cached

        task = self.task_store.find_by_id(task_id)
        if task is None:
            logger.error("Error fetching task: %s not found", task_id)
            raise NotFoundError("Task not found")

        self.cache.set(key, task)
        return task

    def get_by_owner(self, owner_id: str) -> list[Task]:
        """
        Return every task of *owner_id*, serving the list from the cache
        when possible.

        Raises:
            NotFoundError: If the owner does not exist.
        """
        logger.info("Entering get_by_owner")

        try:
            self._ensure_owner_exists(owner_id)
        except NotFoundError as exc:
            logger.error("Error fetching tasks by owner: %s", exc)
            raise

        key = owner_cache_key(owner_id)
        cached = self.cache.get(key)
        if cached is not None:
            logger.info("Returning owner tasks from cache")
            return cached

        tasks = self.task_store.find_by_owner(owner_id)
        self.cache.set(key, tasks)
        logger.info("Fetched %s tasks for owner: %s", len(tasks), owner_id)
        return tasks
