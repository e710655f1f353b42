"""
User registration, login and profile lookup.

Passwords are hashed with Werkzeug (PBKDF2 by default) and only the hash is
stored.  Successful logins return a signed JWT from :mod:`taskhub.jwt`.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any

from werkzeug.security import check_password_hash, generate_password_hash

from ..dtos import CreateUserDTO, LoginDTO
from ..errors import NotFoundError, UnauthorizedError, ValidationError
from ..jwt import create_token
from ..models import Role, User
from ..repositories import UserStore

logger = logging.getLogger(__name__)

EMAIL_MAX_LENGTH = 120


def normalise_email(email: str) -> str:
    return email.strip().lower()


def _require_text(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


class UserService:
    """
    Account operations on top of a :class:`~taskhub.repositories.UserStore`.

    Args:
        user_store: Owner of the user records.
        secret_key: HMAC key for issued tokens.
        token_expiry_hours: Lifetime of issued tokens.
    """

    def __init__(
        self, user_store: UserStore, secret_key: str, token_expiry_hours: int = 24
    ) -> None:
        self.user_store = user_store
        self.secret_key = secret_key
        self.token_expiry_hours = token_expiry_hours

    def create_user(self, dto: CreateUserDTO) -> User:
        """
        Register a new user.

        Raises:
            ValidationError: If email or password is missing, the email is
                too long, the role is unknown, or the email is taken.
        """
        logger.info("Entering create_user")

        if not _require_text(dto.email) or not _require_text(dto.password):
            raise ValidationError("Email and password are required")

        email = normalise_email(dto.email)
        if len(email) > EMAIL_MAX_LENGTH:
            raise ValidationError(f"Email must be {EMAIL_MAX_LENGTH} characters or less")
        if "@" not in email:
            raise ValidationError("Email must be a valid email address")
        if dto.role is not None and dto.role not in [r.value for r in Role]:
            raise ValidationError("Role must be USER or ADMIN")
        if self.user_store.find_by_email(email) is not None:
            raise ValidationError("Email already registered")

        user = User(
            id=str(uuid.uuid4()),
            email=email,
            password_hash=generate_password_hash(dto.password),
            role=Role(dto.role or Role.USER.value),
        )
        logger.debug("Creating user with email: %s", email)
        return self.user_store.save(user)

    def authenticate(self, dto: LoginDTO) -> str:
        """
        Check credentials and issue a login token.

        The same error is raised for an unknown email and a wrong password
        so the response does not reveal which accounts exist.

        Raises:
            ValidationError: If email or password is missing.
            UnauthorizedError: If the credentials do not match a user.
        """
        logger.info("Entering authenticate")

        if not _require_text(dto.email) or not _require_text(dto.password):
            raise ValidationError("Email and password are required")

        user = self.user_store.find_by_email(normalise_email(dto.email))
        if user is None or not check_password_hash(user.password_hash, dto.password):
            logger.warning("Authentication failed for %s", normalise_email(dto.email))
            raise UnauthorizedError("Invalid credentials")

        return create_token(
            user_id=user.id,
            role=user.role,
            secret_key=self.secret_key,
            expiry_hours=self.token_expiry_hours,
        )

    def get_by_id(self, user_id: str) -> User:
        logger.info("Entering get_by_id user")
        user = self.user_store.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user
