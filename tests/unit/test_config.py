"""Unit tests for Config loading from dotenv files and the environment."""
from __future__ import annotations

from pathlib import Path

import pytest

from hostkeeper.config import Config
from hostkeeper.exceptions import HostkeeperConfigError
from hostkeeper.utils import default_hosts_path

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    import os

    for key in list(os.environ):
        if key.startswith("HOSTKEEPER_"):
            monkeypatch.delenv(key)


def test_defaults():
    config = Config.from_env()
    assert config.hosts_file == default_hosts_path()
    assert config.max_backups == 10
    assert config.auto_backup is True
    assert config.use_sudo is True
    config.validate()


def test_env_file_and_environment_precedence(temp_dir, monkeypatch):
    env_file = temp_dir / ".env"
    env_file.write_text(
        "HOSTKEEPER_HOSTS_FILE=/tmp/hosts\n"
        "HOSTKEEPER_MAX_BACKUPS=4\n"
        "HOSTKEEPER_AUTO_BACKUP=no\n"
    )
    monkeypatch.setenv("HOSTKEEPER_MAX_BACKUPS", "7")
    monkeypatch.setenv("HOSTKEEPER_USE_SUDO", "false")
    monkeypatch.setenv("HOSTKEEPER_LOG_LEVEL", "debug")

    config = Config.from_env(str(env_file))

    assert config.hosts_file == "/tmp/hosts"
    assert config.max_backups == 7
    assert config.auto_backup is False
    assert config.use_sudo is False
    assert config.log_level == "DEBUG"


def test_state_dir_moves_backups(monkeypatch):
    monkeypatch.setenv("HOSTKEEPER_STATE_DIR", "/var/tmp/hk")
    config = Config.from_env()
    assert config.state_dir == Path("/var/tmp/hk")
    assert config.backup_dir == Path("/var/tmp/hk/backups")


def test_missing_env_file():
    with pytest.raises(HostkeeperConfigError):
        Config.from_env("/definitely/not/here.env")


@pytest.mark.parametrize(
    "key,value",
    [("HOSTKEEPER_MAX_BACKUPS", "ten"), ("HOSTKEEPER_USE_SUDO", "maybe")],
)
def test_invalid_values(monkeypatch, key, value):
    monkeypatch.setenv(key, value)
    with pytest.raises(HostkeeperConfigError):
        Config.from_env()


def test_validate_rejects_bad_settings():
    with pytest.raises(HostkeeperConfigError):
        Config(log_level="LOUD").validate()
    with pytest.raises(HostkeeperConfigError):
        Config(max_backups=0).validate()
