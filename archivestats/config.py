"""Configuration management for archivestats."""
import logging
import math
import os
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv

from .errors import ConfigurationError

DEFAULT_URL = "http://localhost:8080"
DEFAULT_DATABASE = "local"
DEFAULT_COLLECTION = "ArchiveEntry"
DEFAULT_TIMEOUT = 30.0
DEFAULT_LOG_LEVEL = "INFO"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class Settings:
    """Connection and logging settings."""
    url: str = DEFAULT_URL
    database: str = DEFAULT_DATABASE
    collection: str = DEFAULT_COLLECTION
    timeout: float = DEFAULT_TIMEOUT
    log_level: str = DEFAULT_LOG_LEVEL


def _parse_timeout(value: str) -> float:
    try:
        timeout = float(value)
    except ValueError as e:
        raise ConfigurationError(f"ARCHIVESTATS_TIMEOUT must be a number, got {value!r}") from e
    if not math.isfinite(timeout) or timeout <= 0:
        raise ConfigurationError(f"ARCHIVESTATS_TIMEOUT must be positive, got {value!r}")
    return timeout


def load_settings(env_file=None) -> Settings:
    """
    Read settings from the environment, loading a ``.env`` file first.

    Without ``env_file`` the nearest ``.env`` from the working directory up is used.

    Variables already set in the environment win over the file.
    """
    load_dotenv(env_file or find_dotenv(usecwd=True))
    return Settings(
        url=os.getenv("ARCHIVESTATS_URL", DEFAULT_URL),
        database=os.getenv("ARCHIVESTATS_DATABASE", DEFAULT_DATABASE),
        collection=os.getenv("ARCHIVESTATS_COLLECTION", DEFAULT_COLLECTION),
        timeout=_parse_timeout(os.getenv("ARCHIVESTATS_TIMEOUT", str(DEFAULT_TIMEOUT))),
        log_level=os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
    )


def configure_logging(log_level: str = DEFAULT_LOG_LEVEL) -> None:
    """Set up console logging at ``log_level``."""
    level = getattr(logging, log_level.upper(), None)
    if not isinstance(level, int):
        raise ConfigurationError(f"Unknown log level {log_level!r}")
    logging.basicConfig(level=level, format=LOG_FORMAT)
