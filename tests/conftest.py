"""Pytest configuration and reusable fixtures for hostkeeper tests."""
from __future__ import annotations

import shutil
import sys
import tempfile
from pathlib import Path
from typing import Iterator, List

import pytest

# ---------------------------------------------------------------------------
# Test path setup – make sure `src/` is importable when tests are invoked from
# the project root without an installed package.
# ---------------------------------------------------------------------------
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"

if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from hostkeeper.config import Config  # noqa: E402


SAMPLE_HOSTS = (
    "# Host Database\n"
    "#\n"
    "127.0.0.1\tlocalhost\n"
    "::1 localhost ip6-localhost\n"
    "\n"
    "# staging mappings\n"
    "10.0.0.1 api.local web.local # staging\n"
    "# 10.0.0.1 admin.local\n"
    "10.0.0.2 db.local\n"
)


# ---------------------------------------------------------------------------
# Generic fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def temp_dir() -> Iterator[Path]:
    """Return a temporary directory path that is cleaned up afterwards."""
    tmp_path = Path(tempfile.mkdtemp())
    try:
        yield tmp_path
    finally:
        shutil.rmtree(tmp_path, ignore_errors=True)


@pytest.fixture()
def hosts_file(temp_dir: Path) -> Path:
    path = temp_dir / "hosts"
    path.write_text(SAMPLE_HOSTS, encoding="utf-8")
    return path


@pytest.fixture()
def config(temp_dir: Path, hosts_file: Path) -> Config:
    return Config(
        hosts_file=str(hosts_file),
        backup_dir=temp_dir / "backups",
        state_dir=temp_dir / "state",
        max_backups=3,
        auto_backup=True,
        use_sudo=False,
    )


class FakeExecutor:
    """Stand-in for ShellExecutor that copies files in-process."""

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.copies: List[tuple[str, str]] = []

    def copy_elevated(self, source: str, destination: str, prompt: str | None = None) -> None:
        self.copies.append((source, destination))
        if self.error is not None:
            raise self.error
        shutil.copyfile(source, destination)

    def shell_info(self) -> dict[str, str]:
        return {"shell": "/bin/bash", "version": "GNU bash, version 5.2"}


@pytest.fixture()
def fake_executor() -> FakeExecutor:
    return FakeExecutor()
