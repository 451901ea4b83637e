"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from datetime import timedelta
from typing import Any, Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'

# Values that must never reach a production process
PLACEHOLDER_SECRETS: Final[frozenset[str]] = frozenset({"", "CHANGE_ME", "CHANGE_ME_JWT"})

# Loads .env in development (no-op when the file is missing)
load_dotenv()


class ConfigurationError(RuntimeError):
    """Raised when required settings are missing at application start-up."""


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def env_int(name: str, default: int) -> int:
    """Parse an integer from an environment variable, falling back to ``default``.

    :raises ConfigurationError: When the variable is set but not an integer.
    """
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    try:
        return int(val)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {val!r}") from exc


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    SERVICE_NAME: str
        Identifier reported by the health endpoint and used as JWT issuer.
    SECRET_KEY: str
        Flask secret used for session signing.
    JWT_SECRET_KEY: str
        HMAC key used by ``flask-jwt-extended`` for signing tokens.
    JWT_ACCESS_TOKEN_EXPIRES / JWT_REFRESH_TOKEN_EXPIRES: timedelta
        Token lifetimes; sourced from ``JWT_ACCESS_TOKEN_MINUTES`` (60) and
        ``JWT_REFRESH_TOKEN_DAYS`` (30).
    PASSWORD_HASH_METHOD: str
        Method string passed to :func:`werkzeug.security.generate_password_hash`.
    EMAIL_PASSWORD_PROVIDER: str
        Name of the credential provider used by registration and login.
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    SQLALCHEMY_ENGINE_OPTIONS: dict
        Connection pool tuning forwarded to :func:`sqlalchemy.create_engine`.
    AUTH_LOGIN_RATE_LIMIT: str
        ``flask-limiter`` expression applied to the login endpoint.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    CORS_ORIGINS: str
        Comma-separated list of allowed origins for CORS.
    REQUIRED_SETTINGS: tuple[str, ...]
        Keys that :func:`validate_config` refuses to leave unset.

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    API_BASE_PREFIX = "/api"
    SERVICE_NAME = "catetin-api"
    APP_VERSION = os.getenv("APP_VERSION", "dev")

    # Secrets / security
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "CHANGE_ME_JWT")
    JWT_ALGORITHM = "HS256"
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(minutes=env_int("JWT_ACCESS_TOKEN_MINUTES", 60))
    JWT_REFRESH_TOKEN_EXPIRES = timedelta(days=env_int("JWT_REFRESH_TOKEN_DAYS", 30))
    JWT_ENCODE_ISSUER = os.getenv("JWT_ISSUER", SERVICE_NAME)
    JWT_DECODE_ISSUER = JWT_ENCODE_ISSUER
    PASSWORD_HASH_METHOD = os.getenv("PASSWORD_HASH_METHOD", "scrypt")
    EMAIL_PASSWORD_PROVIDER = "email-password"

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    SQLALCHEMY_ENGINE_OPTIONS: dict[str, Any] = {"pool_pre_ping": True}

    # Rate limiting
    RATELIMIT_ENABLED = env_bool("RATELIMIT_ENABLED", True)
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    AUTH_LOGIN_RATE_LIMIT = os.getenv("AUTH_LOGIN_RATE_LIMIT", "5 per minute")

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging & CORS
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173")

    REQUIRED_SETTINGS: tuple[str, ...] = ()

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development.

    Notes
    -----
    Enables debug mode by default and honors ``SQLALCHEMY_ECHO`` for verbose
    SQL logging when requested.
    """

    APP_ENV = "development"
    DEBUG = env_bool("FLASK_DEBUG", True)
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    CORS_MAX_AGE = 600  # 10 minutes


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and disables debug logs.
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Uses a cheap password hash and disables rate limiting.
    """

    APP_ENV = "testing"
    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    SQLALCHEMY_ENGINE_OPTIONS: dict[str, Any] = {}
    JWT_SECRET_KEY = "testing-secret-key-with-enough-length-for-hs256"
    PASSWORD_HASH_METHOD = "pbkdf2:sha256:1000"
    RATELIMIT_ENABLED = False
    PROPAGATE_EXCEPTIONS = False
    LOG_LEVEL = "WARNING"


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments.

    Notes
    -----
    Keeps debug and SQL echoing disabled and sizes the connection pool for
    a multi-worker deployment. Start-up fails without a real JWT secret and
    an explicit ``DATABASE_URL``.
    """

    APP_ENV = "production"
    DEBUG = False
    SQLALCHEMY_ECHO = False
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "")
    SQLALCHEMY_ENGINE_OPTIONS: dict[str, Any] = {
        "pool_pre_ping": True,
        "pool_size": env_int("DB_POOL_SIZE", 25),
        "max_overflow": env_int("DB_MAX_OVERFLOW", 75),
        "pool_recycle": 300,
    }
    PROPAGATE_EXCEPTIONS = False
    REQUIRED_SETTINGS = ("JWT_SECRET_KEY", "SQLALCHEMY_DATABASE_URI", "SECRET_KEY")


# Map names -> classes (simple, explicit)
CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Returns
    -------
    type[BaseConfig]
        Class to pass to :meth:`flask.Config.from_object`.

    Notes
    -----
    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)


def validate_config(config: Mapping[str, Any]) -> None:
    """Ensure every key listed in ``REQUIRED_SETTINGS`` carries a real value.

    :param config: Loaded Flask configuration mapping.
    :raises ConfigurationError: Naming all missing keys at once.
    """
    missing = [
        key
        for key in config.get("REQUIRED_SETTINGS", ())
        if str(config.get(key) or "").strip() in PLACEHOLDER_SECRETS
    ]
    if missing:
        raise ConfigurationError(f"Missing required settings: {', '.join(missing)}")
