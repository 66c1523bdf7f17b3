from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import List, Optional

from .backups import BackupInfo, BackupStore
from .config import Config
from .exceptions import (
    HostkeeperValidationError,
    HostsEntryNotFoundError,
    HostsReadError,
    validate_required_args,
)
from .hosts_model import HostEntry, HostsDocument, parse
from .shell_executor import ShellExecutor
from .utils import HostsFileInfo, get_hosts_file_info, validate_hostname, validate_ip_address

__all__ = ["HostsManager"]

logger = logging.getLogger("hostkeeper.hosts_manager")

AUTH_PROMPT = "hostkeeper needs permission to modify the hosts file."


class HostsManager:
    """Read, edit and write the system hosts file.

    Every edit reads the file afresh, applies exactly one change to a
    :class:`HostsDocument` and writes the full text back through the
    privileged :class:`ShellExecutor`.  Entries handed out earlier are never
    reused for line lookups.

    Callers must not run overlapping edits against the same file; there is
    no locking between read and write.
    """

    def __init__(
        self,
        config: Config,
        executor: Optional[ShellExecutor] = None,
        backups: Optional[BackupStore] = None,
    ) -> None:
        self.config = config
        self.hosts_path = Path(config.hosts_file)
        self.executor = executor or ShellExecutor(use_sudo=config.use_sudo)
        self.backups = backups or BackupStore(config.backup_dir, config.max_backups)
        logger.info(f"📄 HostsManager initialized for: {self.hosts_path}")

    # ------------------------------------------------------------------
    # Reading and writing
    # ------------------------------------------------------------------

    def read(self) -> str:
        try:
            # newline="" keeps CRLF endings intact for untouched lines.
            with open(self.hosts_path, encoding="utf-8", newline="") as f:
                return f.read()
        except OSError as e:
            raise HostsReadError(
                f"Cannot read hosts file: {e}", {"path": str(self.hosts_path)}
            ) from e

    def document(self) -> HostsDocument:
        return HostsDocument(self.read())

    def entries(self) -> List[HostEntry]:
        return parse(self.read())

    def write(self, content: str, backup: Optional[bool] = None) -> Optional[Path]:
        """Persist *content* to the hosts file.

        Returns the path of the snapshot taken beforehand, if any.  A
        cancelled or failed elevated copy propagates as ``HostsWriteCancelled``
        or ``HostsWriteError`` and leaves the hosts file untouched.
        """
        backup_path = None
        if self.config.auto_backup if backup is None else backup:
            backup_path = self.backup()

        fd, temp_path = tempfile.mkstemp(prefix="hosts_temp_", text=True)
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write(content)
            self.executor.copy_elevated(temp_path, str(self.hosts_path), AUTH_PROMPT)
        finally:
            try:
                os.unlink(temp_path)
            except OSError as e:
                logger.warning(f"Could not clean up temporary file {temp_path}: {e}")

        logger.info("✅ Hosts file updated successfully")
        return backup_path

    def _apply(self, document: HostsDocument) -> HostsDocument:
        self.write(document.text)
        return document

    # ------------------------------------------------------------------
    # Entry edits
    # ------------------------------------------------------------------

    @staticmethod
    def _validate(address: str, hostname: str) -> None:
        validate_required_args(address=address, hostname=hostname)
        if not validate_ip_address(address):
            raise HostkeeperValidationError(
                f"Invalid IP address: {address}", {"address": address}
            )
        if not validate_hostname(hostname):
            raise HostkeeperValidationError(
                f"Invalid hostname: {hostname}", {"hostname": hostname}
            )

    def add(self, address: str, hostname: str, comment: Optional[str] = None) -> HostsDocument:
        self._validate(address, hostname)
        document = self.document().add(address, hostname, comment)
        logger.info(f"➕ Adding host entry: {address} {hostname}")
        return self._apply(document)

    def toggle_line(self, line_number: int) -> HostsDocument:
        document = self.document()
        has_entry = bool(document.entries_on_line(line_number))
        document.toggle_line(line_number)
        # Uncommenting prose would turn it into a bogus mapping.
        if not has_entry:
            raise HostsEntryNotFoundError(
                f"No host entry on line {line_number}", {"line_number": line_number}
            )
        logger.info(f"🔁 Toggled line {line_number}")
        return self._apply(document)

    def toggle(self, address: str, hostname: str, exact: bool = True) -> HostsDocument:
        document = self.document().toggle(address, hostname, exact)
        logger.info(f"🔁 Toggled host entry: {address} {hostname}")
        return self._apply(document)

    def enable_only(self, address: str, hostname: str, exact: bool = True) -> HostsDocument:
        """Enable *hostname* and disable every other entry for *address*."""
        document = self.document().enable_only(address, hostname, exact)
        logger.info(f"✅ Enabled {hostname} and disabled other entries with IP {address}")
        return self._apply(document)

    def disable(self, address: str, hostname: str, exact: bool = True) -> HostsDocument:
        document = self.document().set_enabled(address, hostname, False, exact)
        logger.info(f"⛔ Disabled host entry: {hostname}")
        return self._apply(document)

    def edit(
        self,
        line_number: int,
        address: str,
        hostname: str,
        comment: Optional[str] = None,
        enabled: Optional[bool] = None,
        old_hostname: Optional[str] = None,
    ) -> HostsDocument:
        """Rewrite the entry on *line_number*.

        ``enabled``/``comment`` default to the state currently on that line.
        Passing ``old_hostname`` keeps sibling hostnames of a shared line.
        """
        self._validate(address, hostname)
        document = self.document()
        current = document.entries_on_line(line_number)
        if not current:
            raise HostsEntryNotFoundError(
                f"No host entry on line {line_number}", {"line_number": line_number}
            )
        if enabled is None:
            enabled = current[0].enabled
        if comment is None:
            comment = current[0].comment

        document.replace(line_number, address, hostname, comment, enabled, old_hostname)
        logger.info(f"✏️  Edited line {line_number}: {address} {hostname}")
        return self._apply(document)

    def delete(self, line_number: int) -> HostsDocument:
        document = self.document()
        if not document.entries_on_line(line_number):
            raise HostsEntryNotFoundError(
                f"No host entry on line {line_number}", {"line_number": line_number}
            )
        document.delete(line_number)
        logger.info(f"🗑️  Deleted line {line_number}")
        return self._apply(document)

    # ------------------------------------------------------------------
    # Backups
    # ------------------------------------------------------------------

    def backup(self) -> Path:
        return self.backups.create(self.read())

    def list_backups(self) -> List[BackupInfo]:
        return self.backups.list_backups()

    def restore(self, backup: Optional[str] = None) -> Path:
        """Write a snapshot back to the hosts file (latest when *backup* is None)."""
        if backup is None:
            latest = self.backups.latest()
            if latest is None:
                raise HostsEntryNotFoundError("No backup files found")
            path = latest.path
        else:
            path = self.backups.resolve(backup)

        content = self.backups.read(path)
        self.write(content)
        logger.info(f"♻️  Hosts file restored from {path.name}")
        return path

    def delete_backup(self, backup: str) -> Path:
        path = self.backups.resolve(backup)
        self.backups.delete(path)
        return path

    def clean_backups(self) -> int:
        return self.backups.delete_all()

    def info(self) -> HostsFileInfo:
        return get_hosts_file_info(str(self.hosts_path))
