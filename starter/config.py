from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Starter"
    app_env: str = "production"
    app_key: str = ""
    app_debug: bool = False
    app_url: str = "http://localhost"
    log_level: LogLevel = "INFO"

    # Installer collaborators
    install_command: str = "npm install"
    dependency_dir: str = "node_modules"
    migrate_reset_command: str = "alembic downgrade base"
    migrate_command: str = "alembic upgrade head"
    env_template: str = ".env.example"
    installer_script: str = "install.sh"

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, v):
        return v.upper() if isinstance(v, str) else v

    @property
    def is_installed(self) -> bool:
        return bool(self.app_key)


@lru_cache
def get_settings() -> Settings:
    return Settings()


def reload_settings(env_file: Path | None = None) -> Settings:
    """Drop cached settings and read them again.

    With env_file, settings are read from that file instead of ./.env.
    """
    get_settings.cache_clear()
    if env_file is not None:
        return Settings(_env_file=env_file)
    return get_settings()
