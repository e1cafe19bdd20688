"""Install steps run by `starter install`.

Each step is idempotent where it can be and returns whether it changed
anything. Asking the operator is left to the caller.
"""

import base64
import logging
import secrets
import shlex
import subprocess

from starter.config import Settings, reload_settings
from starter.models import InstallOptions
from starter.services.env_file import (
    check_readable,
    ensure_env_file,
    ensure_key_default,
    set_key,
)

logger = logging.getLogger(__name__)

KEY_BYTES = 32


class InstallError(Exception):
    """An external install step failed."""

    def __init__(self, command: str, detail: str):
        super().__init__(f"`{command}` failed: {detail}")
        self.command = command
        self.detail = detail


def generate_key() -> str:
    """Random application key in the base64: prefixed form."""
    return "base64:" + base64.b64encode(secrets.token_bytes(KEY_BYTES)).decode()


class Installer:
    def __init__(self, options: InstallOptions, settings: Settings | None = None):
        self.options = options
        self.settings = settings or self.reload()

    @property
    def base_dir(self):
        return self.options.base_dir

    @property
    def env_path(self):
        return self.options.env_path

    def _run(self, command: str) -> None:
        args = shlex.split(command)
        logger.info("Running %s", command)
        try:
            subprocess.run(args, cwd=self.base_dir, check=True)
        except FileNotFoundError:
            raise InstallError(command, f"{args[0]} not found") from None
        except subprocess.CalledProcessError as e:
            raise InstallError(command, f"exit status {e.returncode}") from e

    def install_dependencies(self) -> bool:
        if (self.base_dir / self.settings.dependency_dir).exists():
            logger.warning("%s already exists, skipping install", self.settings.dependency_dir)
            return False
        self._run(self.settings.install_command)
        return True

    def setup_env_file(self) -> tuple[bool, bool]:
        """Create .env from the template and make sure APP_ENV is set.

        Returns (created, flag_added).
        """
        template = self.base_dir / self.settings.env_template
        created = ensure_env_file(self.env_path, template)
        if not created:
            logger.warning("%s already exists, skipping creation", self.env_path.name)
        flag_added = ensure_key_default(self.env_path, "APP_ENV", "local")
        return created, flag_added

    def reload(self) -> Settings:
        """Re-read settings after .env has been written."""
        # Report undecodable files as EnvFileError before pydantic-settings parses them
        check_readable(self.env_path)
        self.settings = reload_settings(self.env_path)
        return self.settings

    def generate_app_key(self) -> bool:
        if self.settings.app_key:
            logger.warning("Application key already set, skipping")
            return False
        set_key(self.env_path, "APP_KEY", generate_key())
        self.reload()
        return True

    def run_migrations(self) -> None:
        self._run(self.settings.migrate_reset_command)
        self._run(self.settings.migrate_command)

    def set_project_details(self, name: str, url: str) -> bool:
        name_changed = set_key(self.env_path, "APP_NAME", name)
        url_changed = set_key(self.env_path, "APP_URL", url)
        self.reload()
        return name_changed or url_changed

    def cleanup(self) -> bool:
        script = self.base_dir / self.settings.installer_script
        if not script.exists():
            logger.warning("%s not found, nothing to remove", script.name)
            return False
        script.unlink()
        logger.info("Removed %s", script)
        return True
