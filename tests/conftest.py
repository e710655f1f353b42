"""
Shared pytest fixtures for the Task Hub test suite.

Provides two families of fixtures:

* Component fixtures (stores, cache with a fake clock, transaction log and a
  ``TaskService`` pinned to a fixed "now") for unit tests of the core.
* Application fixtures (Flask app built with the testing config, test
  client, identity headers) for HTTP-level integration tests.

Every fixture is function-scoped: all state lives in memory, so a fresh
instance per test is both cheap and fully isolated.
"""

from __future__ import annotations

import os
import uuid
from datetime import datetime, timezone

import pytest
from faker import Faker

os.environ["FLASK_ENV"] = "testing"

from taskhub import create_app
from taskhub.cache import TTLCache
from taskhub.dtos import CreateTaskDTO, CreateUserDTO
from taskhub.models import Role, Task, User
from taskhub.repositories import TaskStore, UserStore
from taskhub.services import TaskService
from taskhub.transactions import TransactionLog
from tests.helpers import FakeClock, identity_headers

fake = Faker()

FIXED_NOW = datetime(2026, 3, 15, 12, 0, 0, tzinfo=timezone.utc)


def unique_title() -> str:
    """A task title that is not similar to any other generated title."""
    return fake.unique.bothify(text="Task ??##-????")


# -----------------------------------------------------------------------------
# Component Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def now() -> datetime:
    """The instant the service under test believes it is."""
    return FIXED_NOW


@pytest.fixture
def cache_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(cache_clock) -> TTLCache:
    return TTLCache(default_ttl=60, clock=cache_clock)


@pytest.fixture
def task_store() -> TaskStore:
    return TaskStore()


@pytest.fixture
def user_store() -> UserStore:
    return UserStore()


@pytest.fixture
def transactions() -> TransactionLog:
    return TransactionLog()


@pytest.fixture
def task_service(task_store, user_store, cache, transactions, now) -> TaskService:
    return TaskService(task_store, user_store, cache, transactions, clock=lambda: now)


@pytest.fixture
def user_factory(user_store):
    """
    Factory fixture that stores users directly in the user store.

    Returns a callable ``_create_user(**kwargs)``; the password hash is a
    placeholder because the task core never checks it.
    """

    def _create_user(*, email: str | None = None, role: Role = Role.USER) -> User:
        return user_store.save(
            User(
                id=str(uuid.uuid4()),
                email=email or fake.unique.email(),
                password_hash="not-a-real-hash",
                role=role,
            )
        )

    return _create_user


@pytest.fixture
def owner(user_factory) -> User:
    return user_factory()


@pytest.fixture
def other_owner(user_factory) -> User:
    return user_factory()


@pytest.fixture
def task_factory(task_service, owner):
    """
    Factory fixture that creates tasks through ``TaskService.create``.

    Defaults to the ``owner`` fixture and a unique, non-overlapping title.
    """

    def _create_task(
        *,
        owner_id: str | None = None,
        title: str | None = None,
        description: str | None = None,
        priority: str | None = None,
    ) -> Task:
        return task_service.create(
            CreateTaskDTO(
                title=title or unique_title(),
                owner_id=owner_id or owner.id,
                description=description,
                priority=priority,
            )
        )

    return _create_task


# -----------------------------------------------------------------------------
# Application Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def app():
    """
    Provide a Flask application built with the 'testing' configuration.

    Each test gets its own app, and therefore its own stores and cache.
    """
    application = create_app("testing")
    yield application


@pytest.fixture
def client(app):
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture
def services(app):
    """Component handles of the ``app`` fixture."""
    return app.extensions["taskhub"]


@pytest.fixture
def registered_user(services) -> User:
    return services.users.create_user(
        CreateUserDTO(email=fake.unique.email(), password="s3cret-pass")
    )


@pytest.fixture
def second_user(services) -> User:
    return services.users.create_user(
        CreateUserDTO(email=fake.unique.email(), password="s3cret-pass")
    )


@pytest.fixture
def api_headers(registered_user) -> dict[str, str]:
    return identity_headers(registered_user.id, Role.USER)


@pytest.fixture
def second_user_headers(second_user) -> dict[str, str]:
    return identity_headers(second_user.id, Role.USER)


@pytest.fixture
def admin_headers(services) -> dict[str, str]:
    admin = services.users.create_user(
        CreateUserDTO(email=fake.unique.email(), password="adm1n-pass", role=Role.ADMIN)
    )
    return identity_headers(admin.id, Role.ADMIN)


@pytest.fixture
def api_task_factory(services, registered_user):
    """Create tasks inside the ``app`` fixture's own service."""

    def _create_task(*, owner_id: str | None = None, title: str | None = None) -> Task:
        return services.tasks.create(
            CreateTaskDTO(title=title or unique_title(), owner_id=owner_id or registered_user.id)
        )

    return _create_task
