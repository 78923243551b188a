"""Platform API configuration constants and settings loading."""

import logging
import os
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

from pydantic import BaseModel, ValidationError

from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://demo.quome.cloud"
API_PREFIX = "/api/v1"

QUOME_CONFIG_DIR = Path.home() / ".quome"
CONFIG_FILE = QUOME_CONFIG_DIR / "config.json"
SETTINGS_FILENAME = "settings.json"
GLOBAL_SETTINGS_FILE = QUOME_CONFIG_DIR / SETTINGS_FILENAME

PACKAGE_NAME = "quome"
try:
    CLI_VERSION = version(PACKAGE_NAME)
except PackageNotFoundError:
    CLI_VERSION = "0.0.0"
USER_AGENT = f"quome-cli/{CLI_VERSION}"
DEFAULT_TIMEOUT = 30  # seconds

# Self-upgrade
PYPI_URL = f"https://pypi.org/pypi/{PACKAGE_NAME}/json"

# Agent workflows
AGENT_KIND = "quome-coder"
WATCH_POLL_INTERVAL = 2.0  # seconds

# Environment overrides
ENV_API_URL = "QUOME_API_URL"
ENV_TOKEN = "QUOME_TOKEN"
ENV_ORG = "QUOME_ORG"
ENV_APP = "QUOME_APP"
ENV_DEBUG = "QUOME_DEBUG"


class Settings(BaseModel):
    """Endpoint settings, read from settings.json when present."""

    api_url: str = DEFAULT_API_URL

    def get_api_url(self) -> str:
        """Return the API URL, honouring the QUOME_API_URL override."""
        return os.environ.get(ENV_API_URL) or self.api_url


def load_settings(
    local_path: Path | None = None, global_path: Path | None = None
) -> Settings:
    """Load settings with precedence: local file > global file > defaults.

    Args:
        local_path: Settings file in the working directory.
        global_path: Settings file in the Quome config directory.

    Returns:
        Loaded settings.

    Raises:
        ConfigError: If the chosen settings file is not valid JSON settings.
    """
    candidates = [
        local_path if local_path is not None else Path(SETTINGS_FILENAME),
        global_path if global_path is not None else GLOBAL_SETTINGS_FILE,
    ]
    for path in candidates:
        if not path.exists():
            continue
        logger.debug("Loading settings from %s", path)
        try:
            return Settings.model_validate_json(path.read_text())
        except (ValidationError, ValueError) as e:
            raise ConfigError(f"Invalid settings file {path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Cannot read settings file {path}: {e}") from e
    return Settings()


def is_debug_enabled() -> bool:
    """Check if debug logging was requested via the environment."""
    value = os.environ.get(ENV_DEBUG, "")
    return value.lower() in ("1", "true", "yes")
