"""
Configuration Classes for the Task Hub service.

Centralises all environment-dependent settings (JWT signing, cache expiry,
log verbosity) into a hierarchy of configuration classes.  The base
``Config`` class defines development defaults, while subclasses override
only what differs per environment.

All state lives in memory for the lifetime of the process, so there is no
database URI to configure.
"""

from __future__ import annotations

import os


class Config:
    """
    Base configuration with development-safe defaults.

    Attributes:
        SECRET_KEY: Flask session signing key.
        JWT_SECRET_KEY: HMAC key used to sign and verify login tokens.
        JWT_EXPIRY_HOURS: Lifetime of an issued login token.
        JWT_CLOCK_SKEW_SECONDS: Allowed clock drift (in seconds) when
            validating JWT ``exp`` / ``iat`` claims.
        CACHE_DEFAULT_TTL_SECONDS: Expiry applied to cached task reads.
        LOG_LEVEL: Level for the ``taskhub`` logger hierarchy.
    """

    SECRET_KEY: str = os.environ.get(
        "SECRET_KEY", "taskhub-dev-secret-change-in-production"
    )
    JWT_SECRET_KEY: str = os.environ.get(
        "JWT_SECRET_KEY", "taskhub-dev-jwt-secret-change-in-production"
    )
    JWT_EXPIRY_HOURS: int = int(os.environ.get("JWT_EXPIRY_HOURS", "24"))
    JWT_CLOCK_SKEW_SECONDS: int = int(os.environ.get("JWT_CLOCK_SKEW_SECONDS", "30"))

    CACHE_DEFAULT_TTL_SECONDS: float = float(
        os.environ.get("CACHE_DEFAULT_TTL_SECONDS", "60")
    )
    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO")


class DevelopmentConfig(Config):
    """Development environment configuration."""

    DEBUG: bool = True
    TESTING: bool = False
    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "DEBUG")


class TestingConfig(Config):
    """
    Testing environment configuration.

    Uses a fixed JWT key so tests can mint and verify tokens without any
    environment setup.
    """

    DEBUG: bool = True
    TESTING: bool = True
    JWT_SECRET_KEY: str = os.environ.get(
        "TEST_JWT_SECRET_KEY", "test-jwt-secret-key-for-local-tests-123456"
    )


class ProductionConfig(Config):
    """
    Production environment configuration.

    All secrets should be supplied exclusively through environment
    variables in production.
    """

    DEBUG: bool = False
    TESTING: bool = False


config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}


def get_config(env: str | None = None) -> type[Config]:
    """
    Look up and return the configuration class for the given environment.

    Args:
        env: Environment name (``"development"``, ``"testing"``,
            ``"production"``).  When ``None``, falls back to the
            ``FLASK_ENV`` environment variable, defaulting to
            ``"development"``.

    Returns:
        The configuration class (not an instance) corresponding to the
        requested environment.
    """
    if env is None:
        env = os.environ.get("FLASK_ENV", "development")
    return config.get(env, config["default"])
