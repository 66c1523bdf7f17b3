"""
Configuration loaded from the environment and an optional dotenv file.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

from dotenv import dotenv_values

from .exceptions import HostkeeperConfigError
from .utils import default_hosts_path

__all__ = ["Config", "DEFAULT_STATE_DIR"]

DEFAULT_STATE_DIR = Path("~/.hostkeeper")

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _as_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise HostkeeperConfigError(f"Invalid boolean for {name}: {value!r}", {name: value})


@dataclass
class Config:
    """Application configuration."""

    hosts_file: str = field(default_factory=default_hosts_path)
    backup_dir: Path = DEFAULT_STATE_DIR / "backups"
    state_dir: Path = DEFAULT_STATE_DIR
    max_backups: int = 10
    auto_backup: bool = True
    use_sudo: bool = True
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "Config":
        """
        Load configuration from ``env_file`` (if given) and ``os.environ``.

        Environment variables win over the file:
            HOSTKEEPER_HOSTS_FILE: hosts file path (default: platform hosts file)
            HOSTKEEPER_BACKUP_DIR: backup directory (default: ~/.hostkeeper/backups)
            HOSTKEEPER_STATE_DIR: log directory (default: ~/.hostkeeper)
            HOSTKEEPER_MAX_BACKUPS: retention cap (default: 10)
            HOSTKEEPER_AUTO_BACKUP: snapshot before every write (default: true)
            HOSTKEEPER_USE_SUDO: elevate writes with sudo (default: true)
            HOSTKEEPER_LOG_LEVEL: log level (default: INFO)
        """
        values: Dict[str, Optional[str]] = {}
        if env_file:
            if not Path(env_file).is_file():
                raise HostkeeperConfigError(f"Env file not found: {env_file}", {"env_file": env_file})
            values.update(dotenv_values(env_file))
        values.update({k: v for k, v in os.environ.items() if k.startswith("HOSTKEEPER_")})

        def get(name: str) -> Optional[str]:
            value = values.get(f"HOSTKEEPER_{name}")
            return value if value not in (None, "") else None

        config = cls()
        if get("HOSTS_FILE"):
            config.hosts_file = get("HOSTS_FILE")
        if get("STATE_DIR"):
            config.state_dir = Path(get("STATE_DIR"))
            config.backup_dir = config.state_dir / "backups"
        if get("BACKUP_DIR"):
            config.backup_dir = Path(get("BACKUP_DIR"))
        if get("MAX_BACKUPS"):
            try:
                config.max_backups = int(get("MAX_BACKUPS"))
            except ValueError as e:
                raise HostkeeperConfigError(
                    f"Invalid HOSTKEEPER_MAX_BACKUPS: {get('MAX_BACKUPS')!r}"
                ) from e
        if get("AUTO_BACKUP"):
            config.auto_backup = _as_bool("HOSTKEEPER_AUTO_BACKUP", get("AUTO_BACKUP"))
        if get("USE_SUDO"):
            config.use_sudo = _as_bool("HOSTKEEPER_USE_SUDO", get("USE_SUDO"))
        if get("LOG_LEVEL"):
            config.log_level = get("LOG_LEVEL").upper()
        return config

    def validate(self) -> None:
        """Raise ``HostkeeperConfigError`` when a setting is unusable."""
        valid_log_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if self.log_level not in valid_log_levels:
            raise HostkeeperConfigError(
                f"Invalid log level: {self.log_level}. "
                f"Must be one of: {', '.join(sorted(valid_log_levels))}"
            )
        if self.max_backups < 1:
            raise HostkeeperConfigError(
                f"max_backups must be at least 1, got {self.max_backups}"
            )
        if not self.hosts_file:
            raise HostkeeperConfigError("hosts_file must not be empty")
