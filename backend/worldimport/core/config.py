"""Importer settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'

# Fixed schema tag stamped on every store this tool opens
SCHEMA_VERSION: Final[int] = 161

SEED_MODE_ACCUMULATE: Final[str] = "accumulate"
SEED_MODE_REPLACE: Final[str] = "replace"

load_dotenv()


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


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    SQLALCHEMY_DATABASE_URI: str
        Store connection string. The CLI replaces it with the output path
        given on the command line.
    SQLALCHEMY_TRACK_MODIFICATIONS: bool
        Disabled to avoid extra overhead from the event system.
    SQLALCHEMY_ECHO: bool
        When ``True`` SQLAlchemy logs SQL statements for debugging.
    SCHEMA_VERSION: int
        Version tag stamped on the target store.
    IMPORT_PATH: str
        Location of the JSON batch, relative to the working directory.
    SNAPSHOT_PATH: str
        Location of the relational snapshot holding popularity counters.
    SEED_MODE: str
        ``"accumulate"`` keeps prior placeholder rows on reseed,
        ``"replace"`` removes them first. Replace mode purges every user
        named ``<PLACEHOLDER_PREFIX><digits>``, so imported users must not
        use that naming.
    PLACEHOLDER_PREFIX: str
        Username prefix identifying placeholder users.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    """

    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./world.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    SCHEMA_VERSION = SCHEMA_VERSION

    IMPORT_PATH = os.getenv("IMPORT_PATH", "import.json")
    SNAPSHOT_PATH = os.getenv("SNAPSHOT_PATH", "dry.db")
    SEED_MODE = os.getenv("SEED_MODE", SEED_MODE_ACCUMULATE).strip().lower()
    PLACEHOLDER_PREFIX = os.getenv("PLACEHOLDER_PREFIX", "dummy_user_")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local runs against scratch stores."""

    DEBUG = env_bool("FLASK_DEBUG", True)
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and disables debug logs.
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    SEED_MODE = SEED_MODE_ACCUMULATE


class ProductionConfig(BaseConfig):
    """Configuration defaults for operator runs against real data."""

    DEBUG = False
    SQLALCHEMY_ECHO = False


CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)
