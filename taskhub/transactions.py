"""
Transaction bookkeeping for multi-step task mutations.

The log marks the start and end of a logical unit of work and records
compensating operations that callers register along the way.  It does not
stage writes: stores are mutated immediately, and ``rollback`` only discards
the recorded operations without running them.  A failed unit of work can
therefore leave earlier mutations in place.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from .errors import TransactionStateError

logger = logging.getLogger(__name__)


class TransactionLog:
    """Single, non-nesting transaction marker with a queue of operations."""

    def __init__(self) -> None:
        self._active = False
        self._operations: list[Callable[[], None]] = []

    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def pending_operations(self) -> tuple[Callable[[], None], ...]:
        return tuple(self._operations)

    def begin(self) -> None:
        """Start a transaction, discarding anything queued by a previous one."""
        self._active = True
        self._operations = []

    def add_operation(self, operation: Callable[[], None]) -> None:
        if not self._active:
            raise TransactionStateError("No active transaction")
        self._operations.append(operation)

    def commit(self) -> None:
        if not self._active:
            raise TransactionStateError("No active transaction to commit")
        self._reset()

    def rollback(self) -> None:
        """End the transaction without applying queued operations."""
        if not self._active:
            raise TransactionStateError("No active transaction to rollback")
        logger.error("Rolling back transaction")
        self._reset()

    def _reset(self) -> None:
        self._active = False
        self._operations = []
