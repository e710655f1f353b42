"""
Task Hub Flask Application Factory.

Provides the ``create_app`` factory function that assembles the service.
Each application instance owns its own stores, cache and transaction log,
so several instances (one per test, for example) can coexist in the same
process without sharing state.

The service registers two blueprints, both mounted under ``/api``:
  * **tasks_bp** -- task CRUD, bulk deletion and the health check.
  * **users_bp** -- registration, login and profile under ``/api/auth``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from flask import Flask, Response, current_app, jsonify
from werkzeug.exceptions import HTTPException

from .cache import TTLCache
from .config import get_config
from .errors import TaskHubError
from .repositories import TaskStore, UserStore
from .services import TaskService, UserService
from .transactions import TransactionLog

EXTENSION_KEY = "taskhub"

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Per-application component handles, stored in ``app.extensions``."""

    task_store: TaskStore
    user_store: UserStore
    cache: TTLCache
    transactions: TransactionLog
    tasks: TaskService
    users: UserService


def get_services() -> Services:
    """Return the component handles of the application serving this request."""
    return current_app.extensions[EXTENSION_KEY]


def _build_services(app: Flask) -> Services:
    task_store = TaskStore()
    user_store = UserStore()
    cache = TTLCache(default_ttl=app.config["CACHE_DEFAULT_TTL_SECONDS"])
    transactions = TransactionLog()
    return Services(
        task_store=task_store,
        user_store=user_store,
        cache=cache,
        transactions=transactions,
        tasks=TaskService(task_store, user_store, cache, transactions),
        users=UserService(
            user_store,
            secret_key=app.config["JWT_SECRET_KEY"],
            token_expiry_hours=app.config["JWT_EXPIRY_HOURS"],
        ),
    )


def _handle_taskhub_error(error: TaskHubError) -> tuple[Response, int]:
    return jsonify(error.to_dict()), error.status_code


def _handle_http_exception(error: HTTPException) -> tuple[Response, int]:
    return jsonify({"error": error.description}), error.code or 500


def _handle_unexpected_error(error: Exception) -> tuple[Response, int]:
    logger.exception("Internal server error: %s", error)
    return jsonify({"error": "Internal error"}), 500


def register_error_handlers(app: Flask) -> None:
    """
    Translate exceptions into JSON responses.

    This is the only place errors are mapped to status codes: typed
    ``TaskHubError`` subclasses carry their own status, Flask/Werkzeug HTTP
    exceptions keep theirs, and anything else becomes a 500.
    """
    app.register_error_handler(TaskHubError, _handle_taskhub_error)
    app.register_error_handler(HTTPException, _handle_http_exception)
    app.register_error_handler(Exception, _handle_unexpected_error)


def create_app(config_name: str | None = None) -> Flask:
    """
    Create and configure the Task Hub application.

    Instantiates the Flask app, loads the configuration object, builds the
    in-memory components, registers blueprints and error handlers.

    Args:
        config_name: Optional configuration environment name
            (``"development"``, ``"testing"``, ``"production"``).  When *None*,
            the value is read from the ``FLASK_ENV`` environment variable,
            defaulting to ``"development"``.

    Returns:
        A fully configured Flask application instance ready to serve requests.
    """
    app = Flask(__name__)
    config_class = get_config(config_name)
    app.config.from_object(config_class)

    logging.getLogger(__name__).setLevel(app.config["LOG_LEVEL"])
    logger.info("Creating Task Hub app with config: %s", config_class.__name__)

    app.extensions[EXTENSION_KEY] = _build_services(app)

    from .routes.tasks import tasks_bp
    from .routes.users import users_bp

    app.register_blueprint(tasks_bp, url_prefix="/api")
    app.register_blueprint(users_bp, url_prefix="/api/auth")
    register_error_handlers(app)

    return app
