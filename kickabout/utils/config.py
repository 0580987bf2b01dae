"""
Runtime configuration for the Kickabout Teams application.

Settings are read from environment variables so the same code runs on a
laptop, a shared club device or a hosted instance.
"""
import logging
import os
from dataclasses import dataclass
from typing import Optional

from .constants import DEFAULT_HOST, DEFAULT_PORT

logger = logging.getLogger(__name__)

ROSTER_KEY_ENV = "KICKABOUT_ROSTER_KEY"
SECRET_KEY_ENV = "KICKABOUT_SECRET_KEY"
DATA_FILE_ENV = "KICKABOUT_DATA_FILE"
HOST_ENV = "KICKABOUT_HOST"
PORT_ENV = "KICKABOUT_PORT"
LOG_LEVEL_ENV = "KICKABOUT_LOG_LEVEL"

_DEV_SECRET_KEY = "kickabout-dev-secret"
_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _env_str(name: str, default: Optional[str] = None) -> Optional[str]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()


def _env_int(name: str, default: int, *, min_value: Optional[int] = None, max_value: Optional[int] = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %d", name, raw, default)
        return default
    if min_value is not None:
        value = max(min_value, value)
    if max_value is not None:
        value = min(max_value, value)
    return value


@dataclass
class AppConfig:
    """
    Application settings.

    Attributes:
        roster_key: Shared key required for roster edits (None means edits are locked)
        secret_key: Flask session signing key
        data_file: JSON file backing the stores; None keeps everything in memory
        host: Address the web server binds to
        port: Port the web server listens on
        log_level: Logging level name
    """
    roster_key: Optional[str] = None
    secret_key: str = _DEV_SECRET_KEY
    data_file: Optional[str] = None
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Build configuration from ``KICKABOUT_*`` environment variables."""
        config = cls(
            roster_key=_env_str(ROSTER_KEY_ENV),
            secret_key=_env_str(SECRET_KEY_ENV, _DEV_SECRET_KEY),
            data_file=_env_str(DATA_FILE_ENV),
            host=_env_str(HOST_ENV, DEFAULT_HOST),
            port=_env_int(PORT_ENV, DEFAULT_PORT, min_value=1, max_value=65535),
            log_level=(_env_str(LOG_LEVEL_ENV, "INFO") or "INFO").upper(),
        )
        if config.roster_key is None:
            logger.warning("%s is not set; roster edits after the first player are locked", ROSTER_KEY_ENV)
        if config.secret_key == _DEV_SECRET_KEY:
            logger.warning("%s is not set; using the development session key", SECRET_KEY_ENV)
        return config


def configure_logging(level: str = "INFO") -> None:
    """
    Configure root logging for the application.

    Args:
        level: Logging level name (e.g. "INFO", "DEBUG")
    """
    numeric_level = getattr(logging, str(level).upper(), None)
    if not isinstance(numeric_level, int):
        logger.warning("Unknown log level %s; using INFO", level)
        numeric_level = logging.INFO
    logging.basicConfig(level=numeric_level, format=_LOG_FORMAT)
