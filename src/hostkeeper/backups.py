"""Timestamped hosts-file snapshots with a retention cap."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import List

from .exceptions import HostsReadError, HostkeeperError

__all__ = ["BackupInfo", "BackupStore", "BACKUP_PREFIX"]

logger = logging.getLogger("hostkeeper.backups")

BACKUP_PREFIX = "hosts.backup."


@dataclass(frozen=True)
class BackupInfo:
    path: Path
    timestamp: datetime
    size: int

    @property
    def name(self) -> str:
        return self.path.name


def _timestamp() -> str:
    """ISO-8601 UTC timestamp with ':' and '.' made filename-safe."""
    now = datetime.now(timezone.utc)
    stamp = now.strftime("%Y-%m-%dT%H:%M:%S") + f".{now.microsecond // 1000:03d}Z"
    return stamp.replace(":", "-").replace(".", "-")


class BackupStore:
    """Manage ``hosts.backup.<timestamp>`` files inside one directory.

    Parameters
    ----------
    directory:
        Where snapshots live.  Created on first write.
    max_backups:
        Retention cap; after each new snapshot the oldest files beyond this
        count are deleted.
    """

    def __init__(self, directory: Path | str, max_backups: int = 10) -> None:
        if max_backups < 1:
            raise ValueError("max_backups must be at least 1")
        self.directory = Path(directory).expanduser()
        self.max_backups = max_backups
        logger.debug(f"💾 BackupStore initialized - dir: {self.directory}, cap: {max_backups}")

    def ensure_directory(self) -> Path:
        self.directory.mkdir(parents=True, exist_ok=True)
        return self.directory

    def list_backups(self) -> List[BackupInfo]:
        """Return all snapshots, newest first by modification time."""
        if not self.directory.is_dir():
            return []

        backups: List[BackupInfo] = []
        for path in self.directory.iterdir():
            if not path.name.startswith(BACKUP_PREFIX):
                continue
            try:
                stats = path.stat()
            except OSError as e:
                logger.warning(f"Could not stat backup file {path}: {e}")
                continue
            backups.append(
                BackupInfo(
                    path=path,
                    timestamp=datetime.fromtimestamp(stats.st_mtime),
                    size=stats.st_size,
                )
            )

        # sort() is stable, so equal mtimes keep directory listing order
        backups.sort(key=lambda b: b.timestamp, reverse=True)
        return backups

    def latest(self) -> BackupInfo | None:
        backups = self.list_backups()
        return backups[0] if backups else None

    def create(self, content: str) -> Path:
        """Write *content* as a new snapshot and apply the retention cap."""
        self.ensure_directory()
        path = self.directory / f"{BACKUP_PREFIX}{_timestamp()}"
        suffix = 1
        while path.exists():
            path = self.directory / f"{BACKUP_PREFIX}{_timestamp()}-{suffix}"
            suffix += 1

        try:
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write(content)
        except OSError as e:
            raise HostkeeperError(f"Cannot write backup {path}: {e}", {"path": str(path)}) from e

        logger.info(f"💾 Hosts file backed up to: {path}")
        self.prune()
        return path

    def prune(self) -> List[Path]:
        """Delete the oldest snapshots beyond ``max_backups``."""
        excess = self.list_backups()[self.max_backups:]
        deleted: List[Path] = []
        for backup in excess:
            try:
                backup.path.unlink()
                deleted.append(backup.path)
            except OSError as e:
                logger.error(f"Error cleaning up old backup {backup.path}: {e}")

        if deleted:
            logger.info(f"🧹 Cleaned up {len(deleted)} old backup files")
        return deleted

    def read(self, path: Path | str) -> str:
        path = Path(path)
        try:
            with open(path, encoding="utf-8", newline="") as f:
                return f.read()
        except OSError as e:
            raise HostsReadError(f"Cannot read backup {path}: {e}", {"path": str(path)}) from e

    def delete(self, path: Path | str) -> None:
        path = Path(path)
        try:
            path.unlink()
        except FileNotFoundError as e:
            raise HostkeeperError(f"Backup not found: {path}", {"path": str(path)}) from e
        logger.info(f"🗑️  Backup deleted: {path.name}")

    def delete_all(self) -> int:
        """Delete every snapshot; returns how many were removed."""
        deleted = 0
        for backup in self.list_backups():
            try:
                backup.path.unlink()
                deleted += 1
            except OSError as e:
                logger.warning(f"Failed to delete backup {backup.path}: {e}")
        logger.info(f"🧹 Deleted {deleted} backup files")
        return deleted

    def resolve(self, name_or_path: str) -> Path:
        """Accept either a bare backup file name or a full path."""
        candidate = Path(name_or_path).expanduser()
        if candidate.is_file():
            return candidate
        in_dir = self.directory / name_or_path
        if in_dir.is_file():
            return in_dir
        raise HostkeeperError(f"Backup not found: {name_or_path}", {"backup": name_or_path})
