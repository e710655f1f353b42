"""
Unit tests for the transaction log.

The log tracks whether a unit of work is open and what compensating
operations were registered, but never runs them.
"""

from __future__ import annotations

import logging
from unittest.mock import Mock

import pytest

from taskhub.errors import TransactionStateError

pytestmark = pytest.mark.unit


def test_begin_marks_transaction_active(transactions):
    transactions.begin()

    assert transactions.is_active is True


def test_commit_ends_transaction(transactions):
    # Arrange
    transactions.begin()
    transactions.add_operation(lambda: None)

    # Act
    transactions.commit()

    # Assert
    assert transactions.is_active is False
    assert transactions.pending_operations == ()


def test_rollback_ends_transaction_without_running_operations(transactions):
    # Arrange
    operation = Mock()
    transactions.begin()
    transactions.add_operation(operation)

    # Act
    transactions.rollback()

    # Assert
    operation.assert_not_called()
    assert transactions.is_active is False
    assert transactions.pending_operations == ()


def test_rollback_is_logged_as_error(transactions, caplog):
    transactions.begin()

    with caplog.at_level(logging.ERROR, logger="taskhub.transactions"):
        transactions.rollback()

    assert "Rolling back transaction" in caplog.text


def test_begin_discards_previously_queued_operations(transactions):
    # Arrange
    transactions.begin()
    transactions.add_operation(lambda: None)

    # Act
    transactions.begin()

    # Assert
    assert transactions.is_active is True
    assert transactions.pending_operations == ()


def test_add_operation_queues_in_order(transactions):
    first, second = Mock(), Mock()
    transactions.begin()

    transactions.add_operation(first)
    transactions.add_operation(second)

    assert transactions.pending_operations == (first, second)


@pytest.mark.parametrize("method", ["commit", "rollback"])
def test_ending_without_active_transaction_raises(transactions, method):
    with pytest.raises(TransactionStateError):
        getattr(transactions, method)()


def test_add_operation_without_active_transaction_raises(transactions):
    with pytest.raises(TransactionStateError):
        transactions.add_operation(lambda: None)


def test_second_commit_raises(transactions):
    transactions.begin()
    transactions.commit()

    with pytest.raises(TransactionStateError):
        transactions.commit()
