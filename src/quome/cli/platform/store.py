"""Local credential and linked-context store.

Everything the CLI remembers between invocations lives in one JSON file
(~/.quome/config.json by default). The file is not locked: two CLI
processes saving at the same time race and the last write wins.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from uuid import UUID

from pydantic import ValidationError

from .config import CONFIG_FILE, ENV_APP, ENV_ORG, ENV_TOKEN
from .errors import ConfigError, NoLinkedAppError, NoLinkedOrgError, NotLoggedInError
from .types import LinkedContext, LocalConfig, UserConfig

logger = logging.getLogger(__name__)


def _env_uuid(name: str) -> UUID | None:
    raw = os.environ.get(name)
    if not raw:
        return None
    try:
        return UUID(raw)
    except ValueError as e:
        raise ConfigError(f"Invalid {name} UUID: {raw}") from e


class ConfigStore:
    """Load/save access to the local config file.

    Commands receive a store instead of reading the file themselves, so
    tests can point it anywhere.
    """

    def __init__(self, path: Path = CONFIG_FILE) -> None:
        self.path = path
        self._config: LocalConfig | None = None

    @property
    def config(self) -> LocalConfig:
        if self._config is None:
            self._config = self.load()
        return self._config

    def load(self) -> LocalConfig:
        """Read the config file.

        Returns:
            Parsed config, or an empty config if the file does not exist.

        Raises:
            ConfigError: If the file exists but cannot be read or parsed.
        """
        if not self.path.exists():
            logger.debug("No config at %s", self.path)
            self._config = LocalConfig()
            return self._config
        try:
            self._config = LocalConfig.model_validate_json(self.path.read_text())
        except (ValidationError, ValueError) as e:
            raise ConfigError(f"Corrupt config file {self.path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Cannot read config file {self.path}: {e}") from e
        logger.debug("Loaded config from %s", self.path)
        return self._config

    def save(self) -> None:
        """Write the config file atomically with owner-only permissions.

        Raises:
            ConfigError: If the file cannot be written. The previous
                file, if any, is left untouched.
        """
        tmp_path = self.path.with_suffix(".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(self.config.model_dump_json(indent=2))
            # Restrict permissions to owner only
            tmp_path.chmod(0o600)
            os.replace(tmp_path, self.path)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            raise ConfigError(f"Cannot write config file {self.path}: {e}") from e
        logger.debug("Saved config to %s", self.path)

    # ==================== USER ====================

    def get_token(self) -> str | None:
        """Return the API token; QUOME_TOKEN takes precedence."""
        env_token = os.environ.get(ENV_TOKEN)
        if env_token:
            return env_token
        user = self.config.user
        return user.token if user else None

    def require_token(self) -> str:
        token = self.get_token()
        if not token:
            raise NotLoggedInError()
        return token

    def set_user(self, token: str, user_id: UUID, email: str) -> None:
        self.config.user = UserConfig(token=token, id=user_id, email=email)

    def clear_user(self) -> None:
        self.config.user = None

    # ==================== LINKED CONTEXT ====================

    @staticmethod
    def current_dir_key() -> str:
        return str(Path.cwd())

    def get_linked(self) -> LinkedContext | None:
        """Linked context stored for the current directory, if any."""
        return self.config.linked.get(self.current_dir_key())

    def get_linked_org_id(self) -> UUID | None:
        env_org = _env_uuid(ENV_ORG)
        if env_org:
            return env_org
        linked = self.get_linked()
        return linked.org_id if linked else None

    def require_linked_org(self) -> UUID:
        org_id = self.get_linked_org_id()
        if org_id is None:
            raise NoLinkedOrgError()
        return org_id

    def get_linked_app_id(self) -> UUID | None:
        env_app = _env_uuid(ENV_APP)
        if env_app:
            return env_app
        linked = self.get_linked()
        return linked.app_id if linked else None

    def require_linked_app(self) -> UUID:
        app_id = self.get_linked_app_id()
        if app_id is None:
            raise NoLinkedAppError()
        return app_id

    def resolve_org(self, org_id: UUID | None) -> UUID:
        """Return the explicit organization ID, else the linked one."""
        return org_id if org_id is not None else self.require_linked_org()

    def resolve_app(self, app_id: UUID | None) -> UUID:
        """Return the explicit application ID, else the linked one."""
        return app_id if app_id is not None else self.require_linked_app()

    def set_linked(self, context: LinkedContext) -> None:
        self.config.linked[self.current_dir_key()] = context

    def clear_linked(self) -> bool:
        """Forget the current directory's link. Returns False if none existed."""
        return self.config.linked.pop(self.current_dir_key(), None) is not None
